# init_db.py
import psycopg

from config import DATABASE_URL, STORAGE_BACKEND
from log import configure_logging, get_logger

logger = get_logger(__name__)

# 定義初始化 SQL 指令
# 使用 IF NOT EXISTS，重複執行也不會出錯
INIT_SQL = """
-- 1. 使用者表 (users)
-- role 為 NULL 代表尚未被管理員指派角色
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(255) NOT NULL UNIQUE,
    password VARCHAR(255) NOT NULL,
    role VARCHAR(32) CHECK (role IN ('admin', 'project_manager', 'team_lead', 'developer')),
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

-- 2. 專案表 (projects)
-- assigned_to: 負責的組長 (team_lead)，created_by: 建立的專案經理
CREATE TABLE IF NOT EXISTS projects (
    id SERIAL PRIMARY KEY,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    assigned_to INT NOT NULL REFERENCES users(id),
    created_by INT NOT NULL REFERENCES users(id),
    end_date TIMESTAMPTZ NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

-- 3. 任務表 (tasks)
-- 專案底下還有任務時不能刪除專案 (ON DELETE RESTRICT，應用程式層也會先檢查)
CREATE TABLE IF NOT EXISTS tasks (
    id SERIAL PRIMARY KEY,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    project_id INT NOT NULL REFERENCES projects(id) ON DELETE RESTRICT,
    assigned_to INT NOT NULL REFERENCES users(id),
    created_by INT NOT NULL REFERENCES users(id),
    due_time TIMESTAMPTZ NOT NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'in_progress', 'completed')),
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

-- 4. 登入 Token 表 (personal_access_tokens)
-- 只存 token 的 SHA-256 雜湊，明碼只在登入當下回傳一次
CREATE TABLE IF NOT EXISTS personal_access_tokens (
    id SERIAL PRIMARY KEY,
    user_id INT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name VARCHAR(255) NOT NULL,
    token VARCHAR(64) NOT NULL UNIQUE,
    last_used_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- 建立索引以加速查詢
CREATE INDEX IF NOT EXISTS idx_tasks_assigned_to ON tasks(assigned_to);
CREATE INDEX IF NOT EXISTS idx_tasks_created_by ON tasks(created_by);
CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_id);
"""


def init_database():
    """
    建立資料表。伺服器啟動時 (main.py 的 lifespan) 會自動執行一次。
    記憶體模式不需要建表，直接略過。
    """
    if STORAGE_BACKEND == "memory":
        logger.info("schema_init_skipped", backend=STORAGE_BACKEND)
        return

    logger.info("schema_init_started")
    try:
        # 這裡使用同步連線，因為初始化只在伺服器開始接請求之前跑一次
        with psycopg.connect(DATABASE_URL) as conn:
            with conn.cursor() as cur:
                cur.execute(INIT_SQL)
            conn.commit()
    except psycopg.OperationalError as e:
        # 資料庫還沒準備好時不要讓整個服務起不來，第一個請求借連線時會再報錯
        logger.error("schema_init_failed", error=str(e))
        return
    logger.info("schema_init_finished")


if __name__ == "__main__":
    configure_logging()
    init_database()
