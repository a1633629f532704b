# services/identity.py
"""使用者註冊、登入登出與角色指派"""
from psycopg.errors import UniqueViolation

from authorization import Operation, require
from errors import NotFound, ValidationFailure
from log import get_logger
from models.base import parse_payload
from models.user import Actor, AssignRoleRequest, LoginRequest, RegisterRequest, Role, public_user
from security import hash_password, verify_password
from storage.base import USERS, Store
from tokens import issue_token, revoke_token

logger = get_logger(__name__)


async def find_user(store: Store, user_id: int) -> dict:
    user = await store.get(USERS, user_id)
    if user is None:
        raise NotFound("User", user_id)
    return user


async def find_user_by_email(store: Store, email: str) -> dict | None:
    return await store.first(USERS, email=email.strip().lower())


async def register(store: Store, payload: dict) -> dict:
    data = parse_payload(RegisterRequest, payload)

    # 檢查重複 (同一個 Email 只能註冊一次)
    if await find_user_by_email(store, data.email) is not None:
        raise ValidationFailure.field("email", "The email has already been taken.")

    # 新使用者一律沒有角色，要等管理員指派
    try:
        user = await store.insert(USERS, {
            "name": data.name,
            "email": data.email,
            "password": hash_password(data.password),
            "role": Role.UNASSIGNED.to_db(),
        })
    except UniqueViolation as exc:
        # 同時註冊同一個 Email：上面的檢查都通過，由資料庫的 UNIQUE 擋下後來的那一筆
        raise ValidationFailure.field("email", "The email has already been taken.") from exc
    logger.info("user_registered", user_id=user["id"])
    return public_user(user)


async def login(store: Store, payload: dict) -> str:
    data = parse_payload(LoginRequest, payload)

    user = await find_user_by_email(store, data.email)
    if user is None or not verify_password(data.password, user["password"]):
        logger.info("login_failed")
        raise ValidationFailure.field("email", "Invalid credentials.")

    token = await issue_token(store, user)
    logger.info("user_logged_in", user_id=user["id"])
    return token


async def logout(store: Store, actor: Actor) -> None:
    """只撤銷這次請求帶的 token，同一個人其他裝置的 token 不受影響"""
    if actor.token_id is not None:
        await revoke_token(store, actor.token_id)
    logger.info("user_logged_out", user_id=actor.id)


async def assign_role(store: Store, actor: Actor, payload: dict) -> dict:
    require(actor, Operation.ASSIGN_ROLE)
    data = parse_payload(AssignRoleRequest, payload)

    role = Role.parse_assignable(data.role)
    if role is None:
        raise ValidationFailure.field("role", "The selected role is invalid.")

    user = await find_user(store, data.user_id)

    # 直接覆蓋舊角色 (不保留歷史)，重複指派同一個角色結果不變
    user = await store.update(USERS, user["id"], {"role": role.to_db()})
    logger.info("role_assigned", user_id=user["id"], role=role.value, admin_id=actor.id)
    return user
