"""
Abstract interfaces for storage providers.

Defines contracts for expense, user and reference-data stores. The store
owns referential integrity and the conditional (compare-and-set) updates
that keep concurrent reviews from both succeeding.
"""

from abc import ABC, abstractmethod

from src.core.entities.expense import Expense, ExpenseStatus, ExpenseSummary, ExpenseView
from src.core.entities.user import Category, StatusInfo, User


class IExpenseStore(ABC):
    """
    Abstract interface for expense storage.

    Reads return ``None`` for unknown ids instead of raising.
    """

    @abstractmethod
    async def add(self, expense: Expense) -> Expense:
        """Insert a new expense and return it with its id."""
        pass

    @abstractmethod
    async def get(self, expense_id: int) -> Expense | None:
        """Get expense by ID."""
        pass

    @abstractmethod
    async def get_view(self, expense_id: int) -> ExpenseView | None:
        """Get expense by ID with display names attached."""
        pass

    @abstractmethod
    async def list_views(
        self,
        status: ExpenseStatus | None = None,
        user_id: int | None = None,
        newest_first: bool = True,
    ) -> list[ExpenseView]:
        """List expenses, optionally filtered by status or owner."""
        pass

    @abstractmethod
    async def apply_transition(self, before: Expense, after: Expense) -> bool:
        """
        Persist a status transition.

        Only updates the row while it is still in ``before.status``.

        Returns:
            False when no row was updated
        """
        pass

    @abstractmethod
    async def delete_draft(self, expense_id: int) -> bool:
        """Delete an expense only while it is in Draft."""
        pass

    @abstractmethod
    async def summarize(self) -> list[ExpenseSummary]:
        """Count and total expenses per status and currency."""
        pass


class IUserStore(ABC):
    """Abstract interface for user lookups."""

    @abstractmethod
    async def get(self, user_id: int) -> User | None:
        """Get user by ID, active or not."""
        pass

    @abstractmethod
    async def list_active(self) -> list[User]:
        """List active users ordered by name."""
        pass


class IReferenceStore(ABC):
    """Abstract interface for categories and statuses."""

    @abstractmethod
    async def get_category(self, category_id: int) -> Category | None:
        pass

    @abstractmethod
    async def list_categories(self, active_only: bool = True) -> list[Category]:
        pass

    @abstractmethod
    async def list_statuses(self) -> list[StatusInfo]:
        pass
