# storage/postgres.py
from psycopg import AsyncConnection, sql

from storage.base import Store, check_table, stamp


class PgStore(Store):
    """
    PostgreSQL 版本的 Store。

    conn 是 db.get_store 從連線池借出來的連線 (row_factory=dict_row)，
    所以查詢結果直接就是 dict。交易在連線歸還時由連線池自動 commit / rollback。
    """

    def __init__(self, conn: AsyncConnection):
        self.conn = conn

    async def insert(self, table: str, values: dict) -> dict:
        values = stamp(check_table(table), values, creating=True)
        columns = list(values)
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values}) RETURNING *").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
            values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        async with self.conn.cursor() as cur:
            await cur.execute(query, [values[c] for c in columns])
            return await cur.fetchone()

    async def get(self, table: str, row_id: int) -> dict | None:
        query = sql.SQL("SELECT * FROM {table} WHERE id = %s").format(table=sql.Identifier(check_table(table)))
        async with self.conn.cursor() as cur:
            await cur.execute(query, (row_id,))
            return await cur.fetchone()

    async def find(self, table: str, **equals) -> list[dict]:
        query = sql.SQL("SELECT * FROM {table}").format(table=sql.Identifier(check_table(table)))
        params = []
        if equals:
            conditions = []
            for column, value in equals.items():
                # 欄位 = NULL 永遠不成立，要改寫成 IS NULL
                if value is None:
                    conditions.append(sql.SQL("{} IS NULL").format(sql.Identifier(column)))
                else:
                    conditions.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
                    params.append(value)
            query += sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)
        query += sql.SQL(" ORDER BY id")

        async with self.conn.cursor() as cur:
            await cur.execute(query, params)
            return await cur.fetchall()

    async def update(self, table: str, row_id: int, values: dict) -> dict | None:
        values = stamp(check_table(table), values, creating=False)
        if not values:
            return await self.get(table, row_id)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in values
        )
        query = sql.SQL("UPDATE {table} SET {assignments} WHERE id = %s RETURNING *").format(
            table=sql.Identifier(table),
            assignments=assignments,
        )
        async with self.conn.cursor() as cur:
            await cur.execute(query, [*values.values(), row_id])
            return await cur.fetchone()

    async def delete(self, table: str, row_id: int) -> bool:
        query = sql.SQL("DELETE FROM {table} WHERE id = %s").format(table=sql.Identifier(check_table(table)))
        async with self.conn.cursor() as cur:
            await cur.execute(query, (row_id,))
            return cur.rowcount > 0
