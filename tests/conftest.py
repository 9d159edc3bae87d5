"""Pytest configuration and fixtures.

In-memory stores stand in for SQLite so service and API tests run without
a database. They follow the same contract, including the compare-and-set
status update.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from src.config.settings import ChatSettings
from src.core.entities import (
    Category,
    Expense,
    ExpenseStatus,
    ExpenseSummary,
    ExpenseView,
    ReviewDecision,
    StatusInfo,
    User,
)
from src.core.interfaces import IExpenseStore, IReferenceStore, IUserStore
from src.core.services import ExpenseService

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)

ALICE = User(
    id=1,
    user_name="Alice Example",
    email="alice@example.co.uk",
    role_id=1,
    role_name="Employee",
    manager_id=2,
    manager_name="Bob Manager",
)
BOB = User(
    id=2,
    user_name="Bob Manager",
    email="bob.manager@example.co.uk",
    role_id=2,
    role_name="Manager",
)
CAROL = User(
    id=3,
    user_name="Carol Former",
    email="carol@example.co.uk",
    role_id=2,
    role_name="Manager",
    is_active=False,
)

CATEGORIES = [
    Category(id=1, name="Travel"),
    Category(id=2, name="Meals"),
    Category(id=3, name="Supplies"),
    Category(id=4, name="Accommodation"),
    Category(id=5, name="Other"),
    Category(id=6, name="Legacy", is_active=False),
]


class FakeUserStore(IUserStore):
    def __init__(self, users: list[User] | None = None):
        self.users = {u.id: u for u in (users or [ALICE, BOB, CAROL])}

    async def get(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    async def list_active(self) -> list[User]:
        return sorted((u for u in self.users.values() if u.is_active), key=lambda u: u.user_name)


class FakeReferenceStore(IReferenceStore):
    def __init__(self, categories: list[Category] | None = None):
        self.categories = {c.id: c for c in (categories or CATEGORIES)}

    async def get_category(self, category_id: int) -> Category | None:
        return self.categories.get(category_id)

    async def list_categories(self, active_only: bool = True) -> list[Category]:
        found = [c for c in self.categories.values() if c.is_active or not active_only]
        return sorted(found, key=lambda c: c.name)

    async def list_statuses(self) -> list[StatusInfo]:
        return [StatusInfo(id=s.status_id, name=s.value) for s in ExpenseStatus]


class FakeExpenseStore(IExpenseStore):
    def __init__(self, users: FakeUserStore, reference: FakeReferenceStore):
        self.rows: dict[int, Expense] = {}
        self._users = users
        self._reference = reference
        self._next_id = 1

    def _view(self, expense: Expense) -> ExpenseView:
        owner = self._users.users.get(expense.user_id)
        reviewer = self._users.users.get(expense.reviewed_by) if expense.reviewed_by else None
        category = self._reference.categories.get(expense.category_id)
        return ExpenseView(
            expense=expense,
            user_name=owner.user_name if owner else "",
            category_name=category.name if category else "",
            reviewer_name=reviewer.user_name if reviewer else None,
        )

    async def add(self, expense: Expense) -> Expense:
        saved = expense.model_copy(update={"id": self._next_id})
        self.rows[saved.id] = saved
        self._next_id += 1
        return saved

    async def get(self, expense_id: int) -> Expense | None:
        return self.rows.get(expense_id)

    async def get_view(self, expense_id: int) -> ExpenseView | None:
        expense = self.rows.get(expense_id)
        return self._view(expense) if expense else None

    async def list_views(
        self,
        status: ExpenseStatus | None = None,
        user_id: int | None = None,
        newest_first: bool = True,
    ) -> list[ExpenseView]:
        rows = sorted(self.rows.values(), key=lambda e: (e.created_at, e.id), reverse=newest_first)
        return [
            self._view(e)
            for e in rows
            if (status is None or e.status is status) and (user_id is None or e.user_id == user_id)
        ]

    async def apply_transition(self, before: Expense, after: Expense) -> bool:
        current = self.rows.get(before.id)
        if current is None or current.status is not before.status:
            return False
        self.rows[before.id] = after
        return True

    async def delete_draft(self, expense_id: int) -> bool:
        current = self.rows.get(expense_id)
        if current is None or not current.is_draft:
            return False
        del self.rows[expense_id]
        return True

    async def summarize(self) -> list[ExpenseSummary]:
        groups: dict[tuple[int, str], ExpenseSummary] = {}
        for e in self.rows.values():
            key = (e.status.status_id, e.currency)
            current = groups.get(key) or ExpenseSummary(status=e.status, currency=e.currency)
            groups[key] = current.model_copy(
                update={"count": current.count + 1, "total_minor": current.total_minor + e.amount_minor}
            )
        return [groups[k] for k in sorted(groups)]


@pytest.fixture
def user_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def reference_store() -> FakeReferenceStore:
    return FakeReferenceStore()


@pytest.fixture
def expense_store(user_store: FakeUserStore, reference_store: FakeReferenceStore) -> FakeExpenseStore:
    return FakeExpenseStore(user_store, reference_store)


@pytest.fixture
def expense_service(
    expense_store: FakeExpenseStore,
    user_store: FakeUserStore,
    reference_store: FakeReferenceStore,
) -> ExpenseService:
    """Expense service over in-memory stores with a fixed clock."""
    return ExpenseService(
        expense_store=expense_store,
        user_store=user_store,
        reference_store=reference_store,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def make_expense(expense_service: ExpenseService) -> Callable:
    """Create an expense for Alice and drive it to ``status``."""

    async def _make(
        status: ExpenseStatus = ExpenseStatus.DRAFT,
        amount: str = "12.50",
        description: str = "Train to Leeds",
        user_id: int = ALICE.id,
        currency: str = "GBP",
    ) -> ExpenseView:
        view = await expense_service.create_expense(
            user_id=user_id,
            category_id=1,
            amount=Decimal(amount),
            currency=currency,
            expense_date=date(2024, 4, 30),
            description=description,
        )
        expense_id = view.expense.id
        if status is not ExpenseStatus.DRAFT:
            view = await expense_service.submit(expense_id)
        if status is ExpenseStatus.APPROVED:
            view = await expense_service.review(expense_id, BOB.id, ReviewDecision.APPROVE)
        elif status is ExpenseStatus.REJECTED:
            view = await expense_service.review(expense_id, BOB.id, ReviewDecision.REJECT)
        return view

    return _make


@pytest.fixture
def chat_settings() -> ChatSettings:
    """Unconfigured chat settings, independent of the environment."""
    return ChatSettings(endpoint="", model_name="")


@pytest.fixture
def app(expense_service: ExpenseService, chat_settings: ChatSettings) -> FastAPI:
    """Fresh application wired to the in-memory service."""
    from src.api.dependencies import get_chat_settings, get_expenses
    from src.api.main import create_app

    application = create_app()
    application.dependency_overrides[get_expenses] = lambda: expense_service
    application.dependency_overrides[get_chat_settings] = lambda: chat_settings
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Synchronous test client; the lifespan is not run."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for async tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
