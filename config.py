# config.py
import os

# --- 資料庫設定 ---
# 全部從環境變數讀取，預設值只適用於本機開發
DB_NAME = os.getenv("DB_NAME", "task_manager")
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "postgres")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "5432"))

# 組合連線字串 (Connection String)
DATABASE_URL = f"dbname={DB_NAME} user={DB_USER} password={DB_PASSWORD} host={DB_HOST} port={DB_PORT}"

# 儲存後端: "postgres" 或 "memory" (開發/測試用)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "postgres").lower()

# --- Token 設定 ---
TOKEN_NAME = os.getenv("TOKEN_NAME", "api-token")

# --- Log 設定 ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "0").lower() in ("1", "true", "yes")
