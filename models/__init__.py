# models/__init__.py
from .user import Actor, Role, ASSIGNABLE_ROLES, public_user
from .project import ProjectCreate, ProjectUpdate
from .task import TaskStatus, TaskCreate, TeamLeadTaskUpdate, DeveloperTaskUpdate

__all__ = [
    "Actor",
    "Role",
    "ASSIGNABLE_ROLES",
    "public_user",
    "ProjectCreate",
    "ProjectUpdate",
    "TaskStatus",
    "TaskCreate",
    "TeamLeadTaskUpdate",
    "DeveloperTaskUpdate",
]
