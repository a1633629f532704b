# routes/auth.py
from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from db import get_store
from errors import Unauthenticated
from models.user import Actor, public_user
from services import identity
from storage.base import Store
from tokens import resolve_token

router = APIRouter(tags=["auth"])


# --- 核心依賴函式：取得當前登入者 ---
def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(request: Request, store: Store = Depends(get_store)) -> Actor:
    """
    從 Authorization: Bearer <token> 取得目前登入的使用者。
    token 無效或已登出 -> 401
    """
    actor = await resolve_token(store, _bearer_token(request))
    if actor is None:
        raise Unauthenticated()
    return actor


# --- 註冊 / 登入 / 登出 ---

@router.post("/register")
async def register(payload: Any = Body(default=None), store: Store = Depends(get_store)):
    user = await identity.register(store, payload)
    return {"user": user}


@router.post("/login")
async def login(payload: Any = Body(default=None), store: Store = Depends(get_store)):
    token = await identity.login(store, payload)
    return {"token": token}


@router.post("/logout")
async def logout(actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    await identity.logout(store, actor)
    return {"message": "Logged out"}


@router.get("/user")
async def current_user(actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    user = await identity.find_user(store, actor.id)
    return public_user(user)
