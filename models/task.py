# models/task.py
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    # 三種狀態之間可以任意切換，沒有順序限制
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    project_id: int
    assigned_to: int
    due_time: datetime


class TeamLeadTaskUpdate(BaseModel):
    title: str = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    due_time: datetime = None
    status: TaskStatus = None


class DeveloperTaskUpdate(BaseModel):
    # 開發者只能改狀態，而且一定要送
    status: TaskStatus


DEVELOPER_EDITABLE_FIELDS = frozenset({"status"})
