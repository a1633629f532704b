# routes/tasks.py
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from db import get_store
from models.user import Actor, Role
from routes.auth import get_current_user
from services import tasks
from storage.base import Store

router = APIRouter(tags=["tasks"])


@router.get("")
async def index(actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    # 開發者看指派給自己的，組長看自己建立的，其他角色 403
    return await tasks.list_tasks(store, actor)


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_task(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    task = await tasks.create_task(store, actor, payload)
    return {"message": "Task created successfully.", "task": task}


@router.get("/{task_id}")
async def show(task_id: int, actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    return await tasks.show_task(store, actor, task_id)


@router.api_route("/{task_id}", methods=["PUT", "PATCH"])
async def update(
    task_id: int,
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    task = await tasks.update_task(store, actor, task_id, payload)
    if actor.role is Role.DEVELOPER:
        return {"message": "Task status updated.", "task": task}
    return {"message": "Task updated by team lead.", "task": task}


@router.delete("/{task_id}")
async def destroy(task_id: int, actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    await tasks.delete_task(store, actor, task_id)
    return {"message": "Task deleted."}
