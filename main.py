# main.py
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from db import close_pool
from errors import VALIDATION_MESSAGE, ApiError, ValidationFailure
from init_db import init_database
from log import configure_logging, get_logger
from models.base import error_bag

configure_logging()
logger = get_logger(__name__)


# --- 1. 應用程式生命週期 ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # 每次伺服器啟動時，自動檢查並建立資料表 (psycopg.connect 是同步的，丟到 thread 跑)
    await asyncio.to_thread(init_database)
    yield
    await close_pool()


# --- 2. 建立應用程式 ---
app = FastAPI(title="Task Manager API", lifespan=lifespan)


# --- 3. 錯誤處理 ---
# 所有錯誤都在寫入資料之前丟出，這裡只負責轉成統一的 JSON 格式
@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.status_code, reason=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    # 例如 JSON 格式錯誤、路徑參數不是整數
    failure = ValidationFailure(error_bag(exc, skip_prefix=("body", "path", "query")), message=VALIDATION_MESSAGE)
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


# --- 4. 匯入各個功能的路由 (Router) ---
from routes.auth import router as auth_router  # noqa: E402
from routes.admin import router as admin_router  # noqa: E402
from routes.projects import router as projects_router  # noqa: E402
from routes.tasks import router as tasks_router  # noqa: E402

app.include_router(auth_router)  # 註冊 / 登入 / 登出 (無前綴)
app.include_router(admin_router)  # 角色指派 (無前綴)
app.include_router(projects_router, prefix="/projects")
app.include_router(tasks_router, prefix="/tasks")


@app.get("/health")
async def health():
    return {"status": "ok"}
