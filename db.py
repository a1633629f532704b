# db.py
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool
from psycopg.rows import dict_row

from config import DATABASE_URL, STORAGE_BACKEND
from log import get_logger
from storage.base import Store
from storage.memory import MemoryStore
from storage.postgres import PgStore

logger = get_logger(__name__)

# 宣告全域連線池變數，預設為 None
_pool: AsyncConnectionPool | None = None

# STORAGE_BACKEND=memory 時整個程序共用同一個 MemoryStore
_memory_store: MemoryStore | None = None


async def _get_pool() -> AsyncConnectionPool:
    """Lazy Loading: 第一次被呼叫時才建立連線池"""
    global _pool

    if _pool is None:
        logger.info("db_pool_initializing")
        _pool = AsyncConnectionPool(
            conninfo=DATABASE_URL,
            kwargs={"row_factory": dict_row},  # 查詢結果變成 dict (例如 record['id'])
            open=False,
        )
        try:
            await _pool.open()
            logger.info("db_pool_opened")
        except Exception as e:
            logger.error("db_pool_open_failed", error=str(e))
            _pool = None
            raise

    return _pool


@asynccontextmanager
async def connection():
    """
    借出一條連線。
    區塊正常結束時連線池會自動 commit，發生例外則 rollback，所以一個請求就是一個交易。
    """
    pool = await _get_pool()
    async with pool.connection() as conn:
        yield conn


async def close_pool():
    """應用程式關閉時呼叫，把連線池關掉"""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("db_pool_closed")


def memory_store() -> MemoryStore:
    global _memory_store
    if _memory_store is None:
        _memory_store = MemoryStore()
    return _memory_store


async def get_store():
    """
    路由使用的資料存取依賴項。
    測試時會用 app.dependency_overrides[get_store] 換成獨立的 MemoryStore。
    """
    if STORAGE_BACKEND == "memory":
        yield memory_store()
        return

    async with connection() as conn:
        store: Store = PgStore(conn)
        yield store
