"""
Function tools exposed to the chat assistant.

Each tool maps to an ExpenseService operation, so the assistant is bound by
the same workflow rules as the HTTP API. Results are JSON strings handed
back to the model as tool messages.
"""

import json
from collections.abc import Awaitable, Callable
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as ArgumentsError
from pydantic.alias_generators import to_camel

from src.config import get_logger
from src.core.entities.expense import ExpenseStatus, ExpenseSummary, ExpenseView
from src.core.exceptions import ExpenseAppError
from src.core.services.expense_service import ExpenseService

logger = get_logger(__name__)

_STATUS_NAMES = [s.value for s in ExpenseStatus]


def _object(properties: dict[str, Any] | None = None, required: list[str] | None = None) -> dict:
    schema: dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = required
    return schema


def _function(name: str, description: str, parameters: dict) -> dict:
    return {
        "type": "function",
        "function": {"name": name, "description": description, "parameters": parameters},
    }


TOOL_DEFINITIONS: list[dict[str, Any]] = [
    _function("get_all_expenses", "Retrieves all expenses from the database", _object()),
    _function(
        "get_expenses_by_status",
        "Retrieves expenses by status (Draft, Submitted, Approved, or Rejected)",
        _object(
            {"status": {"type": "string", "enum": _STATUS_NAMES, "description": "The status to filter by"}},
            ["status"],
        ),
    ),
    _function(
        "get_expenses_by_user",
        "Retrieves all expenses for a specific user",
        _object({"userId": {"type": "integer", "description": "The ID of the user"}}, ["userId"]),
    ),
    _function(
        "create_expense",
        "Creates a new draft expense",
        _object(
            {
                "userId": {"type": "integer", "description": "The ID of the user creating the expense"},
                "categoryId": {
                    "type": "integer",
                    "description": "The category ID (1=Travel, 2=Meals, 3=Supplies, 4=Accommodation, 5=Other)",
                },
                "amount": {"type": "number", "description": "The amount in major units, e.g. 12.50"},
                "currency": {"type": "string", "description": "ISO currency code, defaults to GBP"},
                "expenseDate": {"type": "string", "description": "The date of the expense in YYYY-MM-DD format"},
                "description": {"type": "string", "description": "Description of the expense"},
            },
            ["userId", "categoryId", "amount", "expenseDate", "description"],
        ),
    ),
    _function(
        "update_expense_status",
        "Updates the status of an expense (submit, approve or reject)",
        _object(
            {
                "expenseId": {"type": "integer", "description": "The ID of the expense to update"},
                "status": {"type": "string", "enum": _STATUS_NAMES, "description": "The new status"},
                "reviewedBy": {
                    "type": "integer",
                    "description": "User ID of the reviewer (required for Approved/Rejected)",
                },
            },
            ["expenseId", "status"],
        ),
    ),
    _function("get_categories", "Gets all expense categories", _object()),
    _function("get_users", "Gets all users in the system", _object()),
    _function(
        "get_expense_summary",
        "Gets a summary of expenses grouped by status with counts and totals",
        _object(),
    ),
]


class _ToolArgs(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class _StatusArgs(_ToolArgs):
    status: str


class _UserArgs(_ToolArgs):
    user_id: int


class _CreateArgs(_ToolArgs):
    user_id: int
    category_id: int
    amount: Decimal
    currency: str | None = None
    expense_date: date
    description: str | None = Field(default=None, max_length=1000)


class _UpdateStatusArgs(_ToolArgs):
    expense_id: int
    status: str
    reviewed_by: int | None = None


def _expense_payload(view: ExpenseView) -> dict[str, Any]:
    expense = view.expense
    return {
        "expenseId": expense.id,
        "userId": expense.user_id,
        "userName": view.user_name,
        "categoryName": view.category_name,
        "status": expense.status.value,
        "amount": str(expense.amount),
        "currency": expense.currency,
        "expenseDate": expense.expense_date.isoformat(),
        "description": expense.description,
        "submittedAt": expense.submitted_at.isoformat() if expense.submitted_at else None,
        "reviewedBy": view.reviewer_name,
        "reviewedAt": expense.reviewed_at.isoformat() if expense.reviewed_at else None,
    }


def _summary_payload(summary: ExpenseSummary) -> dict[str, Any]:
    return {
        "status": summary.status.value,
        "currency": summary.currency,
        "count": summary.count,
        "total": str(summary.total),
    }


class ExpenseChatTools:
    """
    Executes assistant tool calls against the expense service.

    ``execute`` never raises: domain errors become ``{"error": message}``
    so the model can explain them, anything else a generic error object.
    """

    def __init__(self, service: ExpenseService):
        self._service = service
        self._handlers: dict[str, Callable[[str], Awaitable[Any]]] = {
            "get_all_expenses": self._get_all_expenses,
            "get_expenses_by_status": self._get_expenses_by_status,
            "get_expenses_by_user": self._get_expenses_by_user,
            "create_expense": self._create_expense,
            "update_expense_status": self._update_expense_status,
            "get_categories": self._get_categories,
            "get_users": self._get_users,
            "get_expense_summary": self._get_expense_summary,
        }

    def definitions(self) -> list[dict[str, Any]]:
        return TOOL_DEFINITIONS

    @property
    def names(self) -> list[str]:
        return list(self._handlers)

    async def execute(self, name: str, arguments: str | None) -> str:
        """
        Run one tool call.

        Args:
            name: Function name requested by the model
            arguments: JSON-encoded arguments object

        Returns:
            JSON string result
        """
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("chat_tool_unknown", tool=name)
            return json.dumps({"error": f"Unknown function: {name}"})

        logger.info("chat_tool_called", tool=name)
        try:
            result = await handler(arguments or "{}")
        except ArgumentsError as e:
            logger.warning("chat_tool_bad_arguments", tool=name, errors=e.error_count())
            return json.dumps({"error": f"Invalid arguments for {name}"})
        except ExpenseAppError as e:
            logger.info("chat_tool_rejected", tool=name, code=e.code)
            return json.dumps({"error": e.message})
        except Exception as e:
            logger.error("chat_tool_failed", tool=name, error=str(e), exc_info=True)
            return json.dumps({"error": "The operation could not be completed"})

        return json.dumps(result)

    # =========================================================================
    # Handlers
    # =========================================================================

    async def _get_all_expenses(self, arguments: str) -> list[dict]:
        return [_expense_payload(v) for v in await self._service.list_expenses()]

    async def _get_expenses_by_status(self, arguments: str) -> list[dict]:
        args = _StatusArgs.model_validate_json(arguments)
        return [_expense_payload(v) for v in await self._service.list_by_status(args.status)]

    async def _get_expenses_by_user(self, arguments: str) -> list[dict]:
        args = _UserArgs.model_validate_json(arguments)
        return [_expense_payload(v) for v in await self._service.list_by_user(args.user_id)]

    async def _create_expense(self, arguments: str) -> dict:
        args = _CreateArgs.model_validate_json(arguments)
        view = await self._service.create_expense(
            user_id=args.user_id,
            category_id=args.category_id,
            amount=args.amount,
            currency=args.currency,
            expense_date=args.expense_date,
            description=args.description,
        )
        return {"success": True, "expenseId": view.expense.id, "status": view.expense.status.value}

    async def _update_expense_status(self, arguments: str) -> dict:
        args = _UpdateStatusArgs.model_validate_json(arguments)
        view = await self._service.change_status(args.expense_id, args.status, args.reviewed_by)
        return {"success": True, "expenseId": view.expense.id, "status": view.expense.status.value}

    async def _get_categories(self, arguments: str) -> list[dict]:
        return [{"categoryId": c.id, "name": c.name} for c in await self._service.list_categories()]

    async def _get_users(self, arguments: str) -> list[dict]:
        return [
            {"userId": u.id, "userName": u.user_name, "email": u.email, "role": u.role_name}
            for u in await self._service.list_users()
        ]

    async def _get_expense_summary(self, arguments: str) -> list[dict]:
        return [_summary_payload(s) for s in await self._service.summarize()]
