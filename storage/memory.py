# storage/memory.py
from itertools import count

from storage.base import Store, TABLES, check_table, stamp


class MemoryStore(Store):
    """
    放在記憶體裡的 Store，給本機開發 (STORAGE_BACKEND=memory) 與測試使用。
    行為跟 PgStore 一致：回傳的都是複本，修改回傳值不會影響已儲存的資料。
    """

    def __init__(self):
        self._tables: dict[str, dict[int, dict]] = {name: {} for name in TABLES}
        self._ids = {name: count(1) for name in TABLES}

    async def insert(self, table: str, values: dict) -> dict:
        check_table(table)
        row = stamp(table, values, creating=True)
        row["id"] = next(self._ids[table])
        self._tables[table][row["id"]] = row
        return dict(row)

    async def get(self, table: str, row_id: int) -> dict | None:
        row = self._tables[check_table(table)].get(row_id)
        return dict(row) if row is not None else None

    async def find(self, table: str, **equals) -> list[dict]:
        rows = self._tables[check_table(table)]
        return [
            dict(row)
            for _, row in sorted(rows.items())
            if all(row.get(key) == value for key, value in equals.items())
        ]

    async def update(self, table: str, row_id: int, values: dict) -> dict | None:
        row = self._tables[check_table(table)].get(row_id)
        if row is None:
            return None
        row.update(stamp(table, values, creating=False))
        return dict(row)

    async def delete(self, table: str, row_id: int) -> bool:
        return self._tables[check_table(table)].pop(row_id, None) is not None
