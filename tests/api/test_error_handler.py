"""Tests for standardized error responses."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.api.dependencies import get_expenses
from src.api.middleware.error_handler import INTERNAL_ERROR_MESSAGE, status_for
from src.core.exceptions import (
    ConfigurationError,
    DatabaseError,
    ExpenseNotFoundError,
    InvalidTransitionError,
    LLMTimeoutError,
    ValidationError,
)


@pytest.fixture
def failing_service(app) -> MagicMock:
    service = MagicMock()
    app.dependency_overrides[get_expenses] = lambda: service
    return service


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (ValidationError("amount", "bad"), 400),
        (InvalidTransitionError(1, "Approved", "submit"), 400),
        (ExpenseNotFoundError(1), 404),
        (LLMTimeoutError(30), 503),
        (DatabaseError("insert", "locked"), 500),
        (ConfigurationError("broken"), 500),
        (RuntimeError("boom"), 500),
    ],
)
def test_status_for(error, status):
    assert status_for(error) == status


class TestErrorResponses:
    async def test_unexpected_error_is_sanitized(self, async_client, failing_service):
        failing_service.list_expenses = AsyncMock(side_effect=RuntimeError("password=hunter2"))

        response = await async_client.get("/api/expenses")

        assert response.status_code == 500
        data = response.json()
        assert data["errorCode"] == "INTERNAL_ERROR"
        assert data["message"] == INTERNAL_ERROR_MESSAGE
        assert "hunter2" not in response.text

    async def test_database_error_is_sanitized(self, async_client, failing_service):
        failing_service.list_expenses = AsyncMock(
            side_effect=DatabaseError("select", "no such table: expenses")
        )

        response = await async_client.get("/api/expenses")

        assert response.status_code == 500
        data = response.json()
        assert data["errorCode"] == "DATABASE_ERROR"
        assert "no such table" not in data["message"]

    async def test_client_error_keeps_message(self, async_client, failing_service):
        failing_service.submit = AsyncMock(side_effect=InvalidTransitionError(5, "Approved", "submit"))

        response = await async_client.post("/api/expenses/5/submit")

        data = response.json()
        assert response.status_code == 400
        assert data["message"] == "Cannot submit expense 5: status is Approved"
        assert data["hint"].startswith("Expenses move Draft")
        assert len(data["requestId"]) == 8
        assert "timestamp" in data

    async def test_unknown_route(self, async_client):
        response = await async_client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["errorCode"] == "NOT_FOUND"

    async def test_method_not_allowed(self, async_client):
        response = await async_client.put("/api/expenses")

        assert response.status_code == 405
        assert response.json()["errorCode"] == "METHOD_NOT_ALLOWED"

    async def test_malformed_json_body(self, async_client):
        response = await async_client.post(
            "/api/expenses",
            content="{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"
