"""SQLite implementation of user lookups."""

from datetime import datetime

import aiosqlite

from src.core.entities import User
from src.core.interfaces import IUserStore
from src.infrastructure.storage.sqlite.connection import ConnectionPool, get_connection

_USER_SELECT = """
    SELECT
        u.*,
        r.name AS role_name,
        m.user_name AS manager_name
    FROM users u
    JOIN roles r ON r.id = u.role_id
    LEFT JOIN users m ON m.id = u.manager_id
"""


class SQLiteUserStore(IUserStore):
    """SQLite implementation of user lookups."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def get(self, user_id: int) -> User | None:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(f"{_USER_SELECT} WHERE u.id = ?", (user_id,))
            row = await cursor.fetchone()
            return self._row_to_user(row) if row else None

    async def list_active(self) -> list[User]:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(f"{_USER_SELECT} WHERE u.is_active = 1 ORDER BY u.user_name")
            rows = await cursor.fetchall()
            return [self._row_to_user(row) for row in rows]

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            user_name=row["user_name"],
            email=row["email"],
            role_id=row["role_id"],
            role_name=row["role_name"],
            manager_id=row["manager_id"],
            manager_name=row["manager_name"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
