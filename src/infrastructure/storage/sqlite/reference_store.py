"""SQLite implementation of category and status reference data."""

from src.core.entities import Category, StatusInfo
from src.core.interfaces import IReferenceStore
from src.infrastructure.storage.sqlite.connection import ConnectionPool, get_connection


class SQLiteReferenceStore(IReferenceStore):
    """Read-only access to seeded reference tables."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def get_category(self, category_id: int) -> Category | None:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                "SELECT id, name, is_active FROM categories WHERE id = ?",
                (category_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Category(id=row["id"], name=row["name"], is_active=bool(row["is_active"]))

    async def list_categories(self, active_only: bool = True) -> list[Category]:
        sql = "SELECT id, name, is_active FROM categories"
        if active_only:
            sql += " WHERE is_active = 1"
        sql += " ORDER BY name"

        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(sql)
            rows = await cursor.fetchall()
            return [
                Category(id=row["id"], name=row["name"], is_active=bool(row["is_active"]))
                for row in rows
            ]

    async def list_statuses(self) -> list[StatusInfo]:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute("SELECT id, name FROM expense_statuses ORDER BY id")
            rows = await cursor.fetchall()
            return [StatusInfo(id=row["id"], name=row["name"]) for row in rows]
