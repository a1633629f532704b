"""Shared fixtures: an isolated in-memory store per test plus user/project/task factories."""

import asyncio
import itertools
import os
from datetime import timedelta

# 測試一律使用記憶體模式，必須在匯入 config 之前設定
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from db import get_store  # noqa: E402
from main import app  # noqa: E402
from models.base import utcnow  # noqa: E402
from security import hash_password  # noqa: E402
from storage import PROJECTS, TASKS, USERS, MemoryStore  # noqa: E402
from tokens import issue_token  # noqa: E402


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client(store: MemoryStore):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(store: MemoryStore):
    """Insert a user directly. Passwords are only hashed when one is given (bcrypt is slow)."""
    counter = itertools.count(1)

    def _make(role: str | None = None, name: str | None = None, email: str | None = None,
              password: str | None = None) -> dict:
        n = next(counter)
        return asyncio.run(store.insert(USERS, {
            "name": name or f"User {n}",
            "email": email or f"user{n}@example.com",
            "password": hash_password(password) if password else "!",
            "role": role,
        }))

    return _make


@pytest.fixture
def auth(store: MemoryStore):
    """Return Authorization headers carrying a freshly issued token for ``user``."""

    def _auth(user: dict) -> dict:
        token = asyncio.run(issue_token(store, user))
        return {"Authorization": f"Bearer {token}"}

    return _auth


@pytest.fixture
def make_project(store: MemoryStore):
    def _make(assigned_to: int, created_by: int, **overrides) -> dict:
        values = {
            "title": "Sample Project",
            "description": "Test project",
            "assigned_to": assigned_to,
            "created_by": created_by,
            "end_date": utcnow() + timedelta(days=7),
        }
        values.update(overrides)
        return asyncio.run(store.insert(PROJECTS, values))

    return _make


@pytest.fixture
def make_task(store: MemoryStore):
    def _make(project: dict, assigned_to: int, **overrides) -> dict:
        values = {
            "title": "Fix login bug",
            "description": "Error after login",
            "project_id": project["id"],
            "assigned_to": assigned_to,
            "created_by": project["assigned_to"],
            "due_time": utcnow() + timedelta(days=3),
            "status": "pending",
        }
        values.update(overrides)
        return asyncio.run(store.insert(TASKS, values))

    return _make
