"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteExpenseStore,
    SQLiteReferenceStore,
    SQLiteUserStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteExpenseStore",
    "SQLiteUserStore",
    "SQLiteReferenceStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
