"""
Expense workflow policy.

Pure functions that own the legal state transitions of an expense and the
invariants tying its status to the submission and review fields:

    Draft -> Submitted -> Approved
                       -> Rejected

Approved and Rejected are terminal, and nothing moves backwards. All
configuration (supported currencies, reviewer roles) is passed in by the
caller; the only I/O happens in the stores that persist the results.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from src.core.entities.expense import Expense, ExpenseStatus, ExpenseView, ReviewDecision
from src.core.entities.user import User
from src.core.exceptions import InvalidTransitionError, ValidationError

DEFAULT_CURRENCIES: tuple[str, ...] = ("GBP", "USD", "EUR")
DEFAULT_REVIEWER_ROLES: tuple[str, ...] = ("Manager",)

# Largest value an SQLite INTEGER column holds
MAX_AMOUNT_MINOR = 2**63 - 1

_TRANSITIONS: dict[ExpenseStatus, frozenset[ExpenseStatus]] = {
    ExpenseStatus.DRAFT: frozenset({ExpenseStatus.SUBMITTED}),
    ExpenseStatus.SUBMITTED: frozenset({ExpenseStatus.APPROVED, ExpenseStatus.REJECTED}),
    ExpenseStatus.APPROVED: frozenset(),
    ExpenseStatus.REJECTED: frozenset(),
}


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(UTC)


def allowed_transitions(status: ExpenseStatus) -> frozenset[ExpenseStatus]:
    """Statuses reachable in one step from ``status``."""
    return _TRANSITIONS[status]


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """
    Convert a major-unit amount to integer minor units.

    Rounds half away from zero, so 50.00 -> 5000 and 0.005 -> 1.
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("amount", "must be a number", amount)
    if not value.is_finite():
        raise ValidationError("amount", "must be a finite number", amount)
    try:
        return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError("amount", "is too large", amount)


def validate_currency(
    currency: str | None,
    supported: Iterable[str] = DEFAULT_CURRENCIES,
) -> str:
    """Normalize a currency code, rejecting anything unsupported."""
    code = (currency or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError("currency", "must be a 3-letter currency code", currency)
    allowed = {c.upper() for c in supported}
    if code not in allowed:
        raise ValidationError(
            "currency",
            f"unsupported currency, expected one of {', '.join(sorted(allowed))}",
            currency,
        )
    return code


def check_invariants(expense: Expense) -> None:
    """Raise ValidationError if status and workflow fields disagree."""
    reviewed = expense.status.is_reviewed
    if reviewed != (expense.reviewed_by is not None):
        raise ValidationError("reviewed_by", f"inconsistent with status {expense.status.value}")
    if reviewed != (expense.reviewed_at is not None):
        raise ValidationError("reviewed_at", f"inconsistent with status {expense.status.value}")
    submitted = expense.status is not ExpenseStatus.DRAFT
    if submitted != (expense.submitted_at is not None):
        raise ValidationError("submitted_at", f"inconsistent with status {expense.status.value}")


def create_expense(
    user_id: int,
    category_id: int,
    amount_minor: int,
    currency: str,
    expense_date: date,
    description: str | None = None,
    receipt_file: str | None = None,
    *,
    now: datetime | None = None,
    supported_currencies: Iterable[str] = DEFAULT_CURRENCIES,
) -> Expense:
    """
    Build a new Draft expense.

    Raises:
        ValidationError: amount not positive or too large, currency not recognized
    """
    if isinstance(amount_minor, bool) or not isinstance(amount_minor, int):
        raise ValidationError("amount", "must be an integer number of minor units", amount_minor)
    if amount_minor <= 0:
        raise ValidationError("amount", "must be greater than zero", amount_minor)
    if amount_minor > MAX_AMOUNT_MINOR:
        raise ValidationError("amount", "is too large", amount_minor)

    code = validate_currency(currency, supported_currencies)
    text = description.strip() if description else None

    return Expense(
        user_id=user_id,
        category_id=category_id,
        status=ExpenseStatus.DRAFT,
        amount_minor=amount_minor,
        currency=code,
        expense_date=expense_date,
        description=text or None,
        receipt_file=receipt_file or None,
        created_at=_now(now),
    )


def submit_expense(expense: Expense, *, now: datetime | None = None) -> Expense:
    """
    Move a Draft expense to Submitted.

    Raises:
        InvalidTransitionError: expense is not in Draft
    """
    if ExpenseStatus.SUBMITTED not in allowed_transitions(expense.status):
        raise InvalidTransitionError(expense.id, expense.status.value, "submit")

    return expense.model_copy(
        update={"status": ExpenseStatus.SUBMITTED, "submitted_at": _now(now)}
    )


def review_expense(
    expense: Expense,
    reviewer: User | None,
    decision: ReviewDecision,
    *,
    now: datetime | None = None,
    reviewer_roles: Sequence[str] = DEFAULT_REVIEWER_ROLES,
) -> Expense:
    """
    Approve or reject a Submitted expense.

    Self-review is refused whatever the status. After that the status must
    be Submitted, and the reviewer must be an active user holding one of
    ``reviewer_roles``.

    Raises:
        ValidationError: self-review, unknown/inactive reviewer, or role too low
        InvalidTransitionError: expense is not Submitted
    """
    if reviewer is not None and reviewer.id == expense.user_id:
        raise ValidationError("reviewed_by", "users cannot review their own expenses", reviewer.id)

    target = decision.target_status
    if target not in allowed_transitions(expense.status):
        raise InvalidTransitionError(expense.id, expense.status.value, decision.value)

    if reviewer is None:
        raise ValidationError("reviewed_by", "reviewer does not exist")
    if not reviewer.is_active:
        raise ValidationError("reviewed_by", "reviewer is not an active user", reviewer.id)
    if not reviewer.has_role(list(reviewer_roles)):
        raise ValidationError(
            "reviewed_by",
            f"reviewer must have one of the roles: {', '.join(reviewer_roles)}",
            reviewer.id,
        )

    return expense.model_copy(
        update={
            "status": target,
            "reviewed_by": reviewer.id,
            "reviewed_at": _now(now),
        }
    )


def can_delete(expense: Expense) -> bool:
    """Only Draft expenses may be deleted."""
    return expense.status is ExpenseStatus.DRAFT


def search_expenses(views: Iterable[ExpenseView], term: str | None) -> list[ExpenseView]:
    """
    Case-insensitive substring search over description and owner name.

    Keeps the input order. A blank term matches everything.
    """
    needle = (term or "").strip().casefold()
    results = []
    for view in views:
        haystacks = (view.expense.description or "", view.user_name or "")
        if any(needle in h.casefold() for h in haystacks):
            results.append(view)
    return results
