"""
Expense domain entities.

An expense moves forward through Draft -> Submitted -> Approved/Rejected.
Entities are frozen; workflow operations return updated copies.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.core.exceptions import ValidationError


class ExpenseStatus(str, Enum):
    """Expense lifecycle state."""

    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def status_id(self) -> int:
        """Row id of this status in the ``expense_statuses`` table."""
        return _STATUS_IDS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ExpenseStatus.APPROVED, ExpenseStatus.REJECTED)

    @property
    def is_reviewed(self) -> bool:
        return self.is_terminal

    @classmethod
    def from_id(cls, status_id: int) -> "ExpenseStatus":
        for status, sid in _STATUS_IDS.items():
            if sid == status_id:
                return status
        raise ValidationError("status_id", "unknown status id", status_id)

    @classmethod
    def parse(cls, name: str | None) -> "ExpenseStatus":
        """Resolve a status name case-insensitively."""
        if name:
            wanted = name.strip().lower()
            for status in cls:
                if status.value.lower() == wanted:
                    return status
        raise ValidationError(
            "status",
            f"must be one of {', '.join(s.value for s in cls)}",
            name,
        )


_STATUS_IDS: dict[ExpenseStatus, int] = {
    ExpenseStatus.DRAFT: 1,
    ExpenseStatus.SUBMITTED: 2,
    ExpenseStatus.APPROVED: 3,
    ExpenseStatus.REJECTED: 4,
}


class ReviewDecision(str, Enum):
    """Outcome chosen by a reviewer."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> ExpenseStatus:
        if self is ReviewDecision.APPROVE:
            return ExpenseStatus.APPROVED
        return ExpenseStatus.REJECTED


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Expense(BaseModel):
    """
    Expense record owned by a single user.

    Amounts are held in minor units (pence, cents) to avoid floating point
    rounding. Reviewer fields are set only once the expense is Approved or
    Rejected, and ``submitted_at`` only once it has left Draft.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    user_id: int
    category_id: int
    status: ExpenseStatus = ExpenseStatus.DRAFT

    amount_minor: int
    currency: str = "GBP"
    expense_date: date
    description: str | None = None
    receipt_file: str | None = None

    # Workflow timestamps
    submitted_at: datetime | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def amount(self) -> Decimal:
        """Amount in major units (e.g. pounds)."""
        return (Decimal(self.amount_minor) / 100).quantize(Decimal("0.01"))

    @property
    def is_draft(self) -> bool:
        return self.status is ExpenseStatus.DRAFT


class ExpenseView(BaseModel):
    """
    Read projection of an expense.

    Carries the display names the persistence layer joins on; the workflow
    itself only ever looks at ids.
    """

    expense: Expense
    user_name: str = ""
    category_name: str = ""
    reviewer_name: str | None = None


class ExpenseSummary(BaseModel):
    """Count and total of expenses sharing a status and currency."""

    status: ExpenseStatus
    currency: str
    count: int = 0
    total_minor: int = 0

    @property
    def total(self) -> Decimal:
        return (Decimal(self.total_minor) / 100).quantize(Decimal("0.01"))
