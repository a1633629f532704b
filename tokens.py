# tokens.py
"""
Bearer Token 的發放、解析與撤銷。

Token 明碼格式為 "<id>|<secret>"，資料庫只存 secret 的 SHA-256，
所以就算資料外洩也無法直接拿來登入。明碼只會在登入成功時回傳一次。
"""
import hashlib
import hmac
import secrets

from config import TOKEN_NAME
from models.base import utcnow
from models.user import Actor
from storage.base import ACCESS_TOKENS, USERS, Store


def _digest(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


async def issue_token(store: Store, user: dict, name: str = TOKEN_NAME) -> str:
    secret = secrets.token_hex(20)
    row = await store.insert(ACCESS_TOKENS, {
        "user_id": user["id"],
        "name": name,
        "token": _digest(secret),
        "last_used_at": None,
    })
    return f"{row['id']}|{secret}"


async def _find_token(store: Store, plaintext: str) -> dict | None:
    token_id, sep, secret = plaintext.partition("|")
    if not sep:
        return None

    try:
        row = await store.get(ACCESS_TOKENS, int(token_id))
    except ValueError:
        return None
    if row is None or not hmac.compare_digest(row["token"], _digest(secret)):
        return None
    return row


async def resolve_token(store: Store, plaintext: str | None) -> Actor | None:
    """把 Authorization header 裡的 token 換成 Actor；無效就回傳 None"""
    if not plaintext:
        return None

    row = await _find_token(store, plaintext.strip())
    if row is None:
        return None

    user = await store.get(USERS, row["user_id"])
    if user is None:
        return None

    await store.update(ACCESS_TOKENS, row["id"], {"last_used_at": utcnow()})
    return Actor.from_row(user, token_id=row["id"])


async def revoke_token(store: Store, token_id: int) -> bool:
    return await store.delete(ACCESS_TOKENS, token_id)
