"""End-to-end expense workflow over the HTTP API and a real SQLite database."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_chat_settings, get_db_pool, get_expenses
from src.api.main import create_app
from src.application.services import get_expense_service
from src.config.settings import ChatSettings
from src.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteExpenseStore,
    SQLiteReferenceStore,
    SQLiteUserStore,
)
from src.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def sqlite_client(tmp_path: Path) -> AsyncGenerator[AsyncClient, None]:
    db_path = tmp_path / "expenses.db"
    await initialize_database(db_path, create_backup_before=False)
    pool = ConnectionPool(db_path, pool_size=2)

    service = get_expense_service(
        expense_store=SQLiteExpenseStore(pool),
        user_store=SQLiteUserStore(pool),
        reference_store=SQLiteReferenceStore(pool),
    )

    app = create_app()
    app.dependency_overrides[get_expenses] = lambda: service
    app.dependency_overrides[get_db_pool] = lambda: pool
    app.dependency_overrides[get_chat_settings] = lambda: ChatSettings(endpoint="", model_name="")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await pool.close()


async def test_draft_to_approved(sqlite_client: AsyncClient):
    created = await sqlite_client.post(
        "/api/expenses",
        json={"userId": 1, "categoryId": 4, "amount": "89.99", "description": "Hotel, Manchester"},
    )
    assert created.status_code == 201
    expense_id = created.json()["expenseId"]

    submitted = await sqlite_client.post(f"/api/expenses/{expense_id}/submit")
    assert submitted.json()["statusName"] == "Submitted"

    # Alice is an employee and the owner; neither may approve
    refused = await sqlite_client.post(f"/api/expenses/{expense_id}/approve", json={"reviewerId": 1})
    assert refused.status_code == 400

    approved = await sqlite_client.post(f"/api/expenses/{expense_id}/approve", json={"reviewerId": 2})
    assert approved.status_code == 200
    data = approved.json()
    assert data["statusName"] == "Approved"
    assert data["reviewerName"] == "Bob Manager"
    assert data["amountMinor"] == 8999
    assert data["categoryName"] == "Accommodation"

    again = await sqlite_client.post(f"/api/expenses/{expense_id}/reject", json={"reviewerId": 2})
    assert again.status_code == 400

    deleted = await sqlite_client.delete(f"/api/expenses/{expense_id}")
    assert deleted.status_code == 400

    summary = (await sqlite_client.get("/api/expenses/summary")).json()
    assert summary == [
        {"statusName": "Approved", "currency": "GBP", "count": 1, "totalMinor": 8999, "total": 89.99}
    ]


async def test_reference_data_from_seed(sqlite_client: AsyncClient):
    users = (await sqlite_client.get("/api/users")).json()
    statuses = (await sqlite_client.get("/api/statuses")).json()

    assert [u["userName"] for u in users] == ["Alice Example", "Bob Manager"]
    assert [s["statusName"] for s in statuses] == ["Draft", "Submitted", "Approved", "Rejected"]


async def test_db_health(sqlite_client: AsyncClient):
    data = (await sqlite_client.get("/api/health/db")).json()
    assert data["database"]["available"] is True


async def test_search_and_delete_draft(sqlite_client: AsyncClient):
    for description in ("Taxi to airport", "Printer paper"):
        await sqlite_client.post(
            "/api/expenses",
            json={"userId": 1, "categoryId": 1, "amount": "10", "description": description},
        )

    found = (await sqlite_client.get("/api/expenses/search", params={"term": "taxi"})).json()
    assert [e["description"] for e in found] == ["Taxi to airport"]

    response = await sqlite_client.delete(f"/api/expenses/{found[0]['expenseId']}")
    assert response.status_code == 204
    assert len((await sqlite_client.get("/api/expenses")).json()) == 1


async def test_oversized_amount_rejected(sqlite_client: AsyncClient):
    response = await sqlite_client.post(
        "/api/expenses",
        json={"userId": 1, "categoryId": 1, "amount": "100000000000000000", "description": "Typo"},
    )

    assert response.status_code == 400
    assert response.json()["errorCode"] == "VALIDATION_ERROR"
    assert (await sqlite_client.get("/api/expenses")).json() == []


async def test_failed_reviews_leave_row_unchanged(sqlite_client: AsyncClient):
    created = await sqlite_client.post(
        "/api/expenses",
        json={"userId": 1, "categoryId": 2, "amount": "15.00", "description": "Team lunch"},
    )
    expense_id = created.json()["expenseId"]
    path = f"/api/expenses/{expense_id}"

    # Draft cannot be reviewed
    draft = (await sqlite_client.get(path)).json()
    refused = await sqlite_client.post(f"{path}/approve", json={"reviewerId": 2})
    assert refused.status_code == 400
    assert (await sqlite_client.get(path)).json() == draft

    await sqlite_client.post(f"{path}/submit")
    await sqlite_client.post(f"{path}/reject", json={"reviewerId": 2})
    rejected = (await sqlite_client.get(path)).json()
    assert rejected["statusName"] == "Rejected"

    # Rejected is terminal
    for action in ("approve", "reject"):
        response = await sqlite_client.post(f"{path}/{action}", json={"reviewerId": 2})
        assert response.status_code == 400
        assert (await sqlite_client.get(path)).json() == rejected
