# routes/projects.py
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from db import get_store
from models.user import Actor
from routes.auth import get_current_user
from services import projects
from storage.base import Store

router = APIRouter(tags=["projects"])


@router.get("")
async def index(actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    # 不依角色過濾，任何已登入的人都能看全部專案
    return await projects.list_projects(store, actor)


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_project(
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    project = await projects.create_project(store, actor, payload)
    return {"message": "Project created successfully.", "project": project}


@router.get("/{project_id}")
async def show(project_id: int, actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    return await projects.show_project(store, actor, project_id)


@router.api_route("/{project_id}", methods=["PUT", "PATCH"])
async def update(
    project_id: int,
    payload: Any = Body(default=None),
    actor: Actor = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    project = await projects.update_project(store, actor, project_id, payload)
    return {"message": "Project updated.", "project": project}


@router.delete("/{project_id}")
async def destroy(project_id: int, actor: Actor = Depends(get_current_user), store: Store = Depends(get_store)):
    await projects.delete_project(store, actor, project_id)
    return {"message": "Project deleted."}
