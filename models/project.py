# models/project.py
from datetime import datetime

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    assigned_to: int
    end_date: datetime


class ProjectUpdate(BaseModel):
    """部分更新：沒有送的欄位維持原值 (用 exclude_unset 取出有送的欄位)"""

    title: str = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    assigned_to: int = None
    end_date: datetime = None
