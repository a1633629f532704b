# security.py
import bcrypt

# bcrypt 只處理前 72 bytes，新版套件遇到更長的輸入會直接丟 ValueError
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not password or not hashed:
        return False
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except ValueError:
        # 資料庫裡的雜湊格式不對 (例如舊資料存的是明碼)
        return False
