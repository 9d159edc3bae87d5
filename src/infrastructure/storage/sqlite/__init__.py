"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.expense_store import SQLiteExpenseStore
from src.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore
from src.infrastructure.storage.sqlite.user_store import SQLiteUserStore

# Singleton instances bound to the global pool
_expense_store: SQLiteExpenseStore | None = None
_user_store: SQLiteUserStore | None = None
_reference_store: SQLiteReferenceStore | None = None


def get_expense_store() -> SQLiteExpenseStore:
    """Get singleton expense store instance."""
    global _expense_store
    if _expense_store is None:
        _expense_store = SQLiteExpenseStore()
    return _expense_store


def get_user_store() -> SQLiteUserStore:
    """Get singleton user store instance."""
    global _user_store
    if _user_store is None:
        _user_store = SQLiteUserStore()
    return _user_store


def get_reference_store() -> SQLiteReferenceStore:
    """Get singleton reference store instance."""
    global _reference_store
    if _reference_store is None:
        _reference_store = SQLiteReferenceStore()
    return _reference_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteExpenseStore",
    "SQLiteUserStore",
    "SQLiteReferenceStore",
    # Factory functions
    "get_expense_store",
    "get_user_store",
    "get_reference_store",
]
