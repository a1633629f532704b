# storage/__init__.py
from .base import Store, USERS, PROJECTS, TASKS, ACCESS_TOKENS
from .memory import MemoryStore

__all__ = ["Store", "MemoryStore", "USERS", "PROJECTS", "TASKS", "ACCESS_TOKENS"]
