# routes/admin.py
from typing import Any

from fastapi import APIRouter, Body, Depends

from db import get_store
from models.user import Actor
from routes.auth import get_current_user
from services import identity
from storage.base import Store

router = APIRouter(tags=["admin"])


@router.post("/assign-role")
async def assign_role(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """管理員指派角色 (admin / project_manager / team_lead / developer)"""
    user = await identity.assign_role(store, actor, payload)
    return {
        "message": "Role assigned successfully.",
        "user": {"id": user["id"], "name": user["name"], "role": user["role"]},
    }
