# services/projects.py
"""
專案的建立、修改、刪除與查詢。

- 只有專案經理 (project_manager) 能建立/修改/刪除專案
- 專案只能指派給組長 (team_lead)，指派當下檢查一次，之後對方角色改變不會回頭驗證
- 任何已登入的人都能看專案列表與單一專案 (不依角色過濾)
"""
from authorization import Operation, require
from errors import NotFound, ValidationFailure
from log import get_logger
from models.base import as_utc, parse_payload, utcnow
from models.project import ProjectCreate, ProjectUpdate
from models.user import Actor, Role
from services.identity import find_user
from storage.base import PROJECTS, TASKS, USERS, Store

logger = get_logger(__name__)


def _check_end_date(end_date) -> None:
    # 截止日必須「嚴格晚於」現在
    if as_utc(end_date) <= utcnow():
        raise ValidationFailure.field("end_date", "The end date field must be a date after now.")


async def _check_team_lead(store: Store, user_id: int) -> None:
    user = await find_user(store, user_id)
    if Role.from_db(user["role"]) is not Role.TEAM_LEAD:
        raise ValidationFailure.field("assigned_to", "Assigned user must be a team lead.")


async def find_project(store: Store, project_id: int) -> dict:
    project = await store.get(PROJECTS, project_id)
    if project is None:
        raise NotFound("Project", project_id)
    return project


async def list_projects(store: Store, actor: Actor) -> list[dict]:
    require(actor, Operation.PROJECT_READ)
    return await store.find(PROJECTS)


async def show_project(store: Store, actor: Actor, project_id: int) -> dict:
    """回傳專案本體，並附上負責組長的公開資料 (team_lead)"""
    require(actor, Operation.PROJECT_READ)
    project = await find_project(store, project_id)

    lead = await store.get(USERS, project["assigned_to"])
    project["team_lead"] = None
    if lead is not None:
        project["team_lead"] = {
            "id": lead["id"],
            "name": lead["name"],
            "email": lead["email"],
            "role": lead["role"],
        }
    return project


async def create_project(store: Store, actor: Actor, payload: dict) -> dict:
    require(actor, Operation.PROJECT_CREATE)
    data = parse_payload(ProjectCreate, payload)

    _check_end_date(data.end_date)
    await _check_team_lead(store, data.assigned_to)

    project = await store.insert(PROJECTS, {
        "title": data.title,
        "description": data.description,
        "assigned_to": data.assigned_to,
        "created_by": actor.id,
        "end_date": as_utc(data.end_date),
    })
    logger.info("project_created", project_id=project["id"], actor_id=actor.id, team_lead_id=data.assigned_to)
    return project


async def update_project(store: Store, actor: Actor, project_id: int, payload: dict) -> dict:
    require(actor, Operation.PROJECT_UPDATE)
    project = await find_project(store, project_id)
    data = parse_payload(ProjectUpdate, payload)

    # 只更新有送過來的欄位
    changes = data.model_dump(exclude_unset=True)
    if "end_date" in changes:
        _check_end_date(changes["end_date"])
        changes["end_date"] = as_utc(changes["end_date"])
    if "assigned_to" in changes:
        await _check_team_lead(store, changes["assigned_to"])

    if not changes:
        return project

    project = await store.update(PROJECTS, project["id"], changes)
    logger.info("project_updated", project_id=project["id"], actor_id=actor.id, fields=sorted(changes))
    return project


async def delete_project(store: Store, actor: Actor, project_id: int) -> None:
    require(actor, Operation.PROJECT_DELETE)
    project = await find_project(store, project_id)

    # 底下還有任務就不能刪，避免留下指向不存在專案的任務
    if await store.exists(TASKS, project_id=project["id"]):
        raise ValidationFailure.field("project", "The project still has tasks. Delete its tasks first.")

    await store.delete(PROJECTS, project["id"])
    logger.info("project_deleted", project_id=project["id"], actor_id=actor.id)
