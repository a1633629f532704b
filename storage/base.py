# storage/base.py
"""
通用資料存取介面 (Store)

所有 service 都只透過這幾個方法存取資料：
依 id 新增 / 讀取 / 更新 / 刪除，以及依欄位相等條件查詢。
實際的儲存方式 (PostgreSQL 或記憶體) 由 db.get_store 決定。
"""
from abc import ABC, abstractmethod

from models.base import utcnow

USERS = "users"
PROJECTS = "projects"
TASKS = "tasks"
ACCESS_TOKENS = "personal_access_tokens"

# 允許存取的資料表白名單 (SQL 識別字不能直接來自外部輸入)
TABLES = frozenset({USERS, PROJECTS, TASKS, ACCESS_TOKENS})

# 這些表有 created_at / updated_at 欄位
TIMESTAMPED = frozenset({USERS, PROJECTS, TASKS})


def check_table(table: str) -> str:
    if table not in TABLES:
        raise ValueError(f"unknown table: {table}")
    return table


def stamp(table: str, values: dict, creating: bool) -> dict:
    """補上時間戳記，不改動呼叫端傳進來的 dict"""
    values = dict(values)
    if table in TIMESTAMPED:
        now = utcnow()
        if creating:
            values.setdefault("created_at", now)
        values["updated_at"] = now
    elif creating and table == ACCESS_TOKENS:
        values.setdefault("created_at", utcnow())
    return values


class Store(ABC):
    @abstractmethod
    async def insert(self, table: str, values: dict) -> dict:
        """新增一筆資料並回傳完整的資料列 (包含 id)"""

    @abstractmethod
    async def get(self, table: str, row_id: int) -> dict | None: ...

    @abstractmethod
    async def find(self, table: str, **equals) -> list[dict]:
        """依欄位相等條件查詢，依 id 排序。沒有條件時回傳整張表。"""

    @abstractmethod
    async def update(self, table: str, row_id: int, values: dict) -> dict | None:
        """只更新 values 裡的欄位，回傳更新後的資料列；找不到時回傳 None"""

    @abstractmethod
    async def delete(self, table: str, row_id: int) -> bool: ...

    async def first(self, table: str, **equals) -> dict | None:
        rows = await self.find(table, **equals)
        return rows[0] if rows else None

    async def exists(self, table: str, **equals) -> bool:
        return await self.first(table, **equals) is not None
