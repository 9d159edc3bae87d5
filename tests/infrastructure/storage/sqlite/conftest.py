"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from src.core.entities import Expense
from src.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteExpenseStore,
    SQLiteReferenceStore,
    SQLiteUserStore,
)
from src.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool bound to the migrated database."""
    pool = ConnectionPool(initialized_db, pool_size=2, busy_timeout=1000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def expense_store(pool: ConnectionPool) -> SQLiteExpenseStore:
    return SQLiteExpenseStore(pool)


@pytest.fixture
def user_store(pool: ConnectionPool) -> SQLiteUserStore:
    return SQLiteUserStore(pool)


@pytest.fixture
def reference_store(pool: ConnectionPool) -> SQLiteReferenceStore:
    return SQLiteReferenceStore(pool)


@pytest.fixture
def sample_expense() -> Expense:
    """Draft expense owned by the seeded employee (Alice, id 1)."""
    return Expense(
        user_id=1,
        category_id=1,
        amount_minor=1250,
        currency="GBP",
        expense_date=date(2024, 4, 30),
        description="Train to Leeds",
        created_at=datetime(2024, 5, 1, 9, 30, tzinfo=UTC),
    )
