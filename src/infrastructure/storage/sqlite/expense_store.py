"""
SQLite implementation of expense storage.

Status changes are compare-and-set: an UPDATE only touches the row while it
still holds the status the change was computed from.
"""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities import Expense, ExpenseStatus, ExpenseSummary, ExpenseView
from src.core.exceptions import DatabaseError, ValidationError
from src.core.interfaces import IExpenseStore
from src.core.services.expense_workflow import check_invariants
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

_VIEW_SELECT = """
    SELECT
        e.*,
        u.user_name AS user_name,
        c.name AS category_name,
        reviewer.user_name AS reviewer_name
    FROM expenses e
    JOIN users u ON u.id = e.user_id
    JOIN categories c ON c.id = e.category_id
    LEFT JOIN users reviewer ON reviewer.id = e.reviewed_by
"""


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLiteExpenseStore(IExpenseStore):
    """SQLite implementation of expense storage."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def add(self, expense: Expense) -> Expense:
        """Insert a new expense and return it with its id."""
        try:
            async with get_transaction(self._pool) as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO expenses (
                        user_id, category_id, status_id, amount_minor, currency,
                        expense_date, description, receipt_file,
                        submitted_at, reviewed_by, reviewed_at, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        expense.user_id,
                        expense.category_id,
                        expense.status.status_id,
                        expense.amount_minor,
                        expense.currency,
                        expense.expense_date.isoformat(),
                        expense.description,
                        expense.receipt_file,
                        _ts(expense.submitted_at),
                        expense.reviewed_by,
                        _ts(expense.reviewed_at),
                        _ts(expense.created_at),
                    ),
                )
                expense_id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise DatabaseError("insert expense", str(e)) from e

        logger.debug("expense_inserted", expense_id=expense_id)
        return expense.model_copy(update={"id": expense_id})

    async def get(self, expense_id: int) -> Expense | None:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
            row = await cursor.fetchone()
            return self._row_to_expense(row) if row else None

    async def get_view(self, expense_id: int) -> ExpenseView | None:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(f"{_VIEW_SELECT} WHERE e.id = ?", (expense_id,))
            row = await cursor.fetchone()
            return self._row_to_view(row) if row else None

    async def list_views(
        self,
        status: ExpenseStatus | None = None,
        user_id: int | None = None,
        newest_first: bool = True,
    ) -> list[ExpenseView]:
        """List expenses, optionally filtered by status or owner."""
        conditions = []
        params: list = []

        if status is not None:
            conditions.append("e.status_id = ?")
            params.append(status.status_id)
        if user_id is not None:
            conditions.append("e.user_id = ?")
            params.append(user_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        order = "DESC" if newest_first else "ASC"

        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                f"{_VIEW_SELECT} {where} ORDER BY e.created_at {order}, e.id {order}",
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_view(row) for row in rows]

    async def apply_transition(self, before: Expense, after: Expense) -> bool:
        """Persist a status change only if the row is still in ``before.status``."""
        try:
            async with get_transaction(self._pool) as conn:
                cursor = await conn.execute(
                    """
                    UPDATE expenses
                    SET status_id = ?, submitted_at = ?, reviewed_by = ?, reviewed_at = ?
                    WHERE id = ? AND status_id = ?
                    """,
                    (
                        after.status.status_id,
                        _ts(after.submitted_at),
                        after.reviewed_by,
                        _ts(after.reviewed_at),
                        before.id,
                        before.status.status_id,
                    ),
                )
                updated = cursor.rowcount == 1
        except aiosqlite.IntegrityError as e:
            raise DatabaseError("update expense status", str(e)) from e

        if updated:
            logger.debug(
                "expense_status_updated",
                expense_id=before.id,
                from_status=before.status.value,
                to_status=after.status.value,
            )
        return updated

    async def delete_draft(self, expense_id: int) -> bool:
        async with get_transaction(self._pool) as conn:
            cursor = await conn.execute(
                "DELETE FROM expenses WHERE id = ? AND status_id = ?",
                (expense_id, ExpenseStatus.DRAFT.status_id),
            )
            return cursor.rowcount == 1

    async def summarize(self) -> list[ExpenseSummary]:
        """Count and total per status and currency."""
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                """
                SELECT status_id, currency, COUNT(*) AS count, SUM(amount_minor) AS total_minor
                FROM expenses
                GROUP BY status_id, currency
                ORDER BY status_id, currency
                """
            )
            rows = await cursor.fetchall()

        return [
            ExpenseSummary(
                status=ExpenseStatus.from_id(row["status_id"]),
                currency=row["currency"],
                count=row["count"],
                total_minor=row["total_minor"] or 0,
            )
            for row in rows
        ]

    def _row_to_expense(self, row: aiosqlite.Row) -> Expense:
        """Map a row, refusing rows whose status and workflow fields disagree."""
        try:
            expense = Expense(
                id=row["id"],
                user_id=row["user_id"],
                category_id=row["category_id"],
                status=ExpenseStatus.from_id(row["status_id"]),
                amount_minor=row["amount_minor"],
                currency=row["currency"],
                expense_date=date.fromisoformat(row["expense_date"]),
                description=row["description"],
                receipt_file=row["receipt_file"],
                submitted_at=_parse_ts(row["submitted_at"]),
                reviewed_by=row["reviewed_by"],
                reviewed_at=_parse_ts(row["reviewed_at"]),
                created_at=_parse_ts(row["created_at"]),
            )
            check_invariants(expense)
        except ValidationError as e:
            logger.error("expense_row_inconsistent", expense_id=row["id"], error=e.message)
            raise DatabaseError("load expense", f"row {row['id']} is inconsistent: {e.message}") from e
        return expense

    def _row_to_view(self, row: aiosqlite.Row) -> ExpenseView:
        return ExpenseView(
            expense=self._row_to_expense(row),
            user_name=row["user_name"],
            category_name=row["category_name"],
            reviewer_name=row["reviewer_name"],
        )
