"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from decimal import Decimal

from pydantic import Field

from src.application.dto.base import CamelModel
from src.core.entities import ChatRole


class CreateExpenseRequest(CamelModel):
    """Request to create a Draft expense.

    The amount is given in major units and stored in minor units.
    """

    user_id: int = Field(..., description="Owner of the expense", examples=[1])
    category_id: int = Field(..., description="Expense category", examples=[2])
    amount: Decimal = Field(..., description="Amount in major units", examples=["12.50"])
    currency: str | None = Field(
        default=None,
        description="ISO 4217 code, defaults to the configured currency",
        examples=["GBP"],
    )
    expense_date: date | None = Field(default=None, description="Defaults to today")
    description: str | None = Field(default=None, max_length=1000)
    receipt_file: str | None = Field(default=None, max_length=500)


class UpdateStatusRequest(CamelModel):
    """Drive the workflow by naming the target status."""

    status_name: str = Field(..., description="Submitted, Approved or Rejected", examples=["Approved"])
    reviewed_by: int | None = Field(
        default=None,
        description="Reviewer user id, required for Approved/Rejected",
    )


class ReviewRequest(CamelModel):
    """Approve or reject on behalf of a reviewer."""

    reviewer_id: int = Field(..., description="Reviewing manager's user id", examples=[2])


class ChatTurn(CamelModel):
    """Prior conversation turn supplied by the client."""

    role: ChatRole
    content: str = Field(..., max_length=8000)


class ChatRequest(CamelModel):
    """Request to send a message to the assistant."""

    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="User message",
        examples=["Show me all submitted expenses"],
    )
    history: list[ChatTurn] = Field(
        default_factory=list,
        max_length=50,
        description="Earlier turns of this conversation, oldest first",
    )
