"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import UTC, date, datetime

from pydantic import Field

from src.application.dto.base import CamelModel
from src.core.entities import Category, ExpenseSummary, ExpenseView, StatusInfo, User


class ExpenseResponse(CamelModel):
    """Expense with display names."""

    expense_id: int
    user_id: int
    user_name: str
    category_id: int
    category_name: str
    status_id: int
    status_name: str
    amount_minor: int = Field(..., description="Exact amount in minor units")
    amount: float = Field(..., description="Amount in major units, for display")
    currency: str
    expense_date: date
    description: str | None = None
    receipt_file: str | None = None
    submitted_at: datetime | None = None
    reviewed_by: int | None = None
    reviewer_name: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_view(cls, view: ExpenseView) -> "ExpenseResponse":
        expense = view.expense
        return cls(
            expense_id=expense.id,
            user_id=expense.user_id,
            user_name=view.user_name,
            category_id=expense.category_id,
            category_name=view.category_name,
            status_id=expense.status.status_id,
            status_name=expense.status.value,
            amount_minor=expense.amount_minor,
            amount=float(expense.amount),
            currency=expense.currency,
            expense_date=expense.expense_date,
            description=expense.description,
            receipt_file=expense.receipt_file,
            submitted_at=expense.submitted_at,
            reviewed_by=expense.reviewed_by,
            reviewer_name=view.reviewer_name,
            reviewed_at=expense.reviewed_at,
            created_at=expense.created_at,
        )


class SummaryResponse(CamelModel):
    """Count and total for one status and currency."""

    status_name: str
    currency: str
    count: int
    total_minor: int
    total: float

    @classmethod
    def from_entity(cls, summary: ExpenseSummary) -> "SummaryResponse":
        return cls(
            status_name=summary.status.value,
            currency=summary.currency,
            count=summary.count,
            total_minor=summary.total_minor,
            total=float(summary.total),
        )


class CategoryResponse(CamelModel):
    category_id: int
    category_name: str

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryResponse":
        return cls(category_id=category.id, category_name=category.name)


class StatusResponse(CamelModel):
    status_id: int
    status_name: str

    @classmethod
    def from_entity(cls, status: StatusInfo) -> "StatusResponse":
        return cls(status_id=status.id, status_name=status.name)


class UserResponse(CamelModel):
    user_id: int
    user_name: str
    email: str
    role_name: str
    manager_id: int | None = None
    manager_name: str | None = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            user_id=user.id,
            user_name=user.user_name,
            email=user.email,
            role_name=user.role_name,
            manager_id=user.manager_id,
            manager_name=user.manager_name,
        )


class ChatResponse(CamelModel):
    """Assistant reply.

    ``response`` is the raw text; ``response_html`` the escaped and
    rendered version safe to insert into a page.
    """

    response: str
    success: bool = True
    error: str | None = None
    response_html: str = ""


class ProviderHealthResponse(CamelModel):
    """Health status of one dependency."""

    available: bool
    provider: str | None = None
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    chat: ProviderHealthResponse | None = None


class ErrorResponse(CamelModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. EXPENSE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    request_id: str | None = Field(default=None, description="Request correlation id")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
