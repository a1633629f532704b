# services/tasks.py
"""
任務的建立、修改、刪除與查詢。

- 組長 (team_lead) 只能在「指派給自己的專案」裡建立任務，而且只能指派給開發者
- 建立任務的組長可以修改任何欄位；被指派的開發者只能改狀態
- 任務列表依角色過濾，單一任務則任何已登入的人都能看
"""
from authorization import (
    AuthContext,
    Operation,
    require,
    require_role,
    task_list_filter,
    task_update_operation,
)
from errors import AuthorizationFailure, NotFound, ValidationFailure
from log import get_logger
from models.base import as_utc, parse_payload, utcnow
from models.task import DeveloperTaskUpdate, TaskCreate, TaskStatus, TeamLeadTaskUpdate
from models.user import Actor, Role
from services.identity import find_user
from services.projects import find_project
from storage.base import TASKS, Store

logger = get_logger(__name__)


def _check_due_time(due_time) -> None:
    # 以「日」為單位：今天到期也可以 (專案截止日則必須晚於現在)
    today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    if as_utc(due_time) < today:
        raise ValidationFailure.field("due_time", "The due time field must be a date after or equal to today.")


async def _check_developer(store: Store, user_id: int) -> None:
    user = await find_user(store, user_id)
    if Role.from_db(user["role"]) is not Role.DEVELOPER:
        raise ValidationFailure.field("assigned_to", "Assigned user must be a developer.")


async def find_task(store: Store, task_id: int) -> dict:
    task = await store.get(TASKS, task_id)
    if task is None:
        raise NotFound("Task", task_id)
    return task


async def list_tasks(store: Store, actor: Actor) -> list[dict]:
    scope = task_list_filter(actor)
    if not isinstance(scope, dict):
        raise AuthorizationFailure(scope.reason)
    return await store.find(TASKS, **scope)


async def show_task(store: Store, actor: Actor, task_id: int) -> dict:
    require(actor, Operation.TASK_READ)
    return await find_task(store, task_id)


async def create_task(store: Store, actor: Actor, payload: dict) -> dict:
    require_role(actor, Operation.TASK_CREATE)
    data = parse_payload(TaskCreate, payload)

    _check_due_time(data.due_time)
    await _check_developer(store, data.assigned_to)

    project = await find_project(store, data.project_id)
    require(actor, Operation.TASK_CREATE, AuthContext(project=project))

    task = await store.insert(TASKS, {
        "title": data.title,
        "description": data.description,
        "project_id": project["id"],
        "assigned_to": data.assigned_to,
        "created_by": actor.id,
        "due_time": as_utc(data.due_time),
        "status": TaskStatus.PENDING.value,
    })
    logger.info("task_created", task_id=task["id"], project_id=project["id"], actor_id=actor.id)
    return task


async def update_task(store: Store, actor: Actor, task_id: int, payload: dict) -> dict:
    """
    依角色分流：
    - 組長 (建立者)：title / description / due_time / status 都可選填
    - 開發者 (被指派者)：只能送 status，而且必填；多送其他欄位一律 403
    權限檢查在欄位驗證之前，所以沒有權限的人不管送什麼都是 403。
    """
    task = await find_task(store, task_id)
    fields = frozenset(payload) if isinstance(payload, dict) else frozenset()

    operation = task_update_operation(actor)
    require(actor, operation, AuthContext(task=task, fields=fields))

    if operation is Operation.TASK_UPDATE_STATUS:
        data = parse_payload(DeveloperTaskUpdate, payload)
        changes = {"status": data.status.value}
    else:
        data = parse_payload(TeamLeadTaskUpdate, payload)
        changes = data.model_dump(exclude_unset=True)
        if "due_time" in changes:
            _check_due_time(changes["due_time"])
            changes["due_time"] = as_utc(changes["due_time"])
        if "status" in changes:
            changes["status"] = changes["status"].value

    if not changes:
        return task

    task = await store.update(TASKS, task["id"], changes)
    logger.info("task_updated", task_id=task["id"], actor_id=actor.id, fields=sorted(changes))
    return task


async def delete_task(store: Store, actor: Actor, task_id: int) -> None:
    task = await find_task(store, task_id)
    require(actor, Operation.TASK_DELETE, AuthContext(task=task))

    await store.delete(TASKS, task["id"])
    logger.info("task_deleted", task_id=task["id"], actor_id=actor.id)
