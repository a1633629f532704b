# authorization.py
"""
角色權限判斷 (Role Authorization Engine)

authorize(actor, operation, context) 是一個純函式：
只根據「誰 (actor)」、「做什麼 (operation)」、「對哪筆資料 (context)」回傳 Allowed 或 Denied，
不讀資料庫、不改資料，所以可以直接拿假資料做單元測試。

判斷分兩段：
1. role_gate   只看角色
2. authorize   角色通過後，再檢查與目標資料的關係 (是不是自己的專案 / 任務)

Denied 分三種：
- ROLE      角色不對 (例如開發者想建立專案)
- OWNERSHIP 角色對，但不是自己的資料 (例如組長想改別人建立的任務)
- FIELD     角色與關係都對，但想改不被允許的欄位 (例如開發者想改任務標題)
三種都會變成 403。被指派者的角色檢查屬於資料驗證 (422)，由各個 service 處理。
"""
from dataclasses import dataclass, field
from enum import Enum

from errors import AuthorizationFailure
from models.task import DEVELOPER_EDITABLE_FIELDS
from models.user import Actor, Role


class Operation(str, Enum):
    ASSIGN_ROLE = "assign-role"
    PROJECT_CREATE = "project.create"
    PROJECT_UPDATE = "project.update"
    PROJECT_DELETE = "project.delete"
    PROJECT_READ = "project.read"
    TASK_CREATE = "task.create"
    TASK_UPDATE = "task.update"
    TASK_UPDATE_STATUS = "task.update_status"
    TASK_DELETE = "task.delete"
    TASK_READ = "task.read"
    TASK_LIST = "task.list"


class DenialKind(str, Enum):
    ROLE = "role"
    OWNERSHIP = "ownership"
    FIELD = "field"


@dataclass(frozen=True)
class Allowed:
    allowed = True


@dataclass(frozen=True)
class Denied:
    kind: DenialKind
    reason: str
    allowed = False


Decision = Allowed | Denied

ALLOWED = Allowed()

TASK_DELETE_REASON = "Only the assigning team lead can delete this task."


@dataclass(frozen=True)
class AuthContext:
    """被操作的目標資料。只需要填該操作會用到的欄位。"""

    project: dict | None = None
    task: dict | None = None
    # 這次請求想要修改的欄位名稱
    fields: frozenset = field(default_factory=frozenset)


def _require_role(actor: Actor, role: Role, reason: str) -> Decision:
    if actor.role is role:
        return ALLOWED
    return Denied(DenialKind.ROLE, reason)


def _require_owner(owner_id, actor: Actor, reason: str) -> Decision:
    if owner_id == actor.id:
        return ALLOWED
    return Denied(DenialKind.OWNERSHIP, reason)


def _target(entity: dict | None, name: str, operation: Operation) -> dict:
    if entity is None:
        raise ValueError(f"{operation.value} needs the target {name} in its context")
    return entity


def role_gate(actor: Actor, operation: Operation) -> Decision:
    match operation:
        case Operation.ASSIGN_ROLE:
            return _require_role(actor, Role.ADMIN, "Unauthorized. Only admins can assign roles.")
        case Operation.PROJECT_CREATE:
            return _require_role(actor, Role.PROJECT_MANAGER, "Only project managers can assign projects.")
        case Operation.PROJECT_UPDATE:
            return _require_role(actor, Role.PROJECT_MANAGER, "Only project managers can update projects.")
        case Operation.PROJECT_DELETE:
            return _require_role(actor, Role.PROJECT_MANAGER, "Only project managers can delete projects.")
        case Operation.PROJECT_READ | Operation.TASK_READ:
            # 只要有登入就能看 (包含還沒有角色的人)
            return ALLOWED
        case Operation.TASK_CREATE:
            return _require_role(actor, Role.TEAM_LEAD, "Only team leads can assign tasks.")
        case Operation.TASK_UPDATE:
            return _require_role(actor, Role.TEAM_LEAD, "Unauthorized.")
        case Operation.TASK_UPDATE_STATUS:
            return _require_role(actor, Role.DEVELOPER, "Unauthorized.")
        case Operation.TASK_DELETE:
            return _require_role(actor, Role.TEAM_LEAD, TASK_DELETE_REASON)
        case Operation.TASK_LIST:
            if actor.role in (Role.DEVELOPER, Role.TEAM_LEAD):
                return ALLOWED
            return Denied(DenialKind.ROLE, "Unauthorized.")
        case _:
            raise ValueError(f"unknown operation: {operation!r}")


def authorize(actor: Actor, operation: Operation, context: AuthContext | None = None) -> Decision:
    decision = role_gate(actor, operation)
    if not decision.allowed:
        return decision

    context = context or AuthContext()
    match operation:
        case Operation.TASK_CREATE:
            project = _target(context.project, "project", operation)
            return _require_owner(project["assigned_to"], actor, "You can only assign tasks in your own projects.")

        case Operation.TASK_UPDATE:
            task = _target(context.task, "task", operation)
            return _require_owner(task["created_by"], actor, "Unauthorized.")

        case Operation.TASK_UPDATE_STATUS:
            task = _target(context.task, "task", operation)
            decision = _require_owner(task["assigned_to"], actor, "Unauthorized.")
            if not decision.allowed:
                return decision
            extra = sorted(set(context.fields) - DEVELOPER_EDITABLE_FIELDS)
            if extra:
                return Denied(
                    DenialKind.FIELD,
                    f"Developers may only update the task status (not permitted: {', '.join(extra)}).",
                )
            return ALLOWED

        case Operation.TASK_DELETE:
            task = _target(context.task, "task", operation)
            return _require_owner(task["created_by"], actor, TASK_DELETE_REASON)

        case _:
            # 其他操作沒有關聯條件，角色通過就好
            return ALLOWED


def task_update_operation(actor: Actor) -> Operation:
    """任務更新依角色分流：開發者走「只改狀態」，其他人走完整更新 (再由 authorize 擋掉)"""
    if actor.role is Role.DEVELOPER:
        return Operation.TASK_UPDATE_STATUS
    return Operation.TASK_UPDATE


def task_list_filter(actor: Actor) -> dict | Denied:
    """任務列表可以看到的範圍：開發者看指派給自己的，組長看自己建立的"""
    decision = role_gate(actor, Operation.TASK_LIST)
    if not decision.allowed:
        return decision
    match actor.role:
        case Role.DEVELOPER:
            return {"assigned_to": actor.id}
        case Role.TEAM_LEAD:
            return {"created_by": actor.id}
        case _:
            raise ValueError(f"no task list scope for role {actor.role!r}")


def require_role(actor: Actor, operation: Operation) -> None:
    """只檢查角色，用在還沒讀到目標資料之前 (先擋 403，再做欄位驗證)"""
    decision = role_gate(actor, operation)
    if not decision.allowed:
        raise AuthorizationFailure(decision.reason)


def require(actor: Actor, operation: Operation, context: AuthContext | None = None) -> None:
    """authorize 的便利版本：被拒絕就直接丟 AuthorizationFailure"""
    decision = authorize(actor, operation, context)
    if not decision.allowed:
        raise AuthorizationFailure(decision.reason)
