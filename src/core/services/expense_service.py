"""
Expense service.

Orchestrates the expense, user and reference stores around the workflow
policy. Every status change is computed by ``expense_workflow`` and then
persisted conditionally on the status it was computed from, so two
concurrent reviews cannot both succeed.
"""

from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime
from decimal import Decimal

from src.config import get_logger
from src.core.entities.expense import (
    Expense,
    ExpenseStatus,
    ExpenseSummary,
    ExpenseView,
    ReviewDecision,
)
from src.core.entities.user import Category, StatusInfo, User
from src.core.exceptions import (
    ExpenseNotFoundError,
    InvalidTransitionError,
    UserNotFoundError,
    ValidationError,
)
from src.core.interfaces.storage import IExpenseStore, IReferenceStore, IUserStore
from src.core.services import expense_workflow as workflow

logger = get_logger(__name__)


class ExpenseService:
    """
    Expense use cases shared by the HTTP routes and the chat tools.

    Configuration values are passed in explicitly; the service never reads
    global settings.
    """

    def __init__(
        self,
        expense_store: IExpenseStore,
        user_store: IUserStore,
        reference_store: IReferenceStore,
        supported_currencies: Sequence[str] = workflow.DEFAULT_CURRENCIES,
        default_currency: str = "GBP",
        reviewer_roles: Sequence[str] = workflow.DEFAULT_REVIEWER_ROLES,
        clock: Callable[[], datetime] | None = None,
    ):
        self._expenses = expense_store
        self._users = user_store
        self._reference = reference_store
        self._currencies = tuple(supported_currencies)
        self._default_currency = default_currency
        self._reviewer_roles = tuple(reviewer_roles)
        self._clock = clock or (lambda: datetime.now(UTC))

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_expenses(self) -> list[ExpenseView]:
        """All expenses, newest first."""
        return await self._expenses.list_views()

    async def list_by_status(self, status_name: str) -> list[ExpenseView]:
        status = ExpenseStatus.parse(status_name)
        return await self._expenses.list_views(status=status)

    async def list_by_user(self, user_id: int) -> list[ExpenseView]:
        if await self._users.get(user_id) is None:
            raise UserNotFoundError(user_id)
        return await self._expenses.list_views(user_id=user_id)

    async def get_expense(self, expense_id: int) -> ExpenseView:
        view = await self._expenses.get_view(expense_id)
        if view is None:
            raise ExpenseNotFoundError(expense_id)
        return view

    async def search(self, term: str | None) -> list[ExpenseView]:
        """Search description and owner name, in creation order."""
        views = await self._expenses.list_views(newest_first=False)
        results = workflow.search_expenses(views, term)
        logger.debug("expense_search", term=term, matches=len(results))
        return results

    async def summarize(self) -> list[ExpenseSummary]:
        return await self._expenses.summarize()

    async def list_categories(self) -> list[Category]:
        return await self._reference.list_categories(active_only=True)

    async def list_statuses(self) -> list[StatusInfo]:
        return await self._reference.list_statuses()

    async def list_users(self) -> list[User]:
        return await self._users.list_active()

    # =========================================================================
    # Commands
    # =========================================================================

    async def create_expense(
        self,
        user_id: int,
        category_id: int,
        amount: Decimal,
        currency: str | None = None,
        expense_date: date | None = None,
        description: str | None = None,
        receipt_file: str | None = None,
    ) -> ExpenseView:
        """
        Create a Draft expense for an active user.

        Args:
            user_id: Owner of the expense
            category_id: Active category id
            amount: Amount in major units, converted to minor units
            currency: ISO code, defaults to the configured default currency
            expense_date: Defaults to today
            description: Optional free text
            receipt_file: Optional receipt reference

        Raises:
            ValidationError: unknown/inactive owner or category, bad amount or currency
        """
        owner = await self._users.get(user_id)
        if owner is None or not owner.is_active:
            raise ValidationError("user_id", "user does not exist or is inactive", user_id)

        category = await self._reference.get_category(category_id)
        if category is None or not category.is_active:
            raise ValidationError("category_id", "category does not exist or is inactive", category_id)

        now = self._clock()
        expense = workflow.create_expense(
            user_id=user_id,
            category_id=category_id,
            amount_minor=workflow.to_minor_units(amount),
            currency=currency or self._default_currency,
            expense_date=expense_date or now.date(),
            description=description,
            receipt_file=receipt_file,
            now=now,
            supported_currencies=self._currencies,
        )
        saved = await self._expenses.add(expense)

        logger.info(
            "expense_created",
            expense_id=saved.id,
            user_id=user_id,
            amount_minor=saved.amount_minor,
            currency=saved.currency,
        )
        return await self.get_expense(saved.id)

    async def submit(self, expense_id: int) -> ExpenseView:
        """Move a Draft expense to Submitted."""
        expense = await self._load(expense_id)
        updated = workflow.submit_expense(expense, now=self._clock())
        await self._persist(expense, updated, "submit")

        logger.info("expense_submitted", expense_id=expense_id)
        return await self.get_expense(expense_id)

    async def review(
        self,
        expense_id: int,
        reviewer_id: int,
        decision: ReviewDecision,
    ) -> ExpenseView:
        """Approve or reject a Submitted expense on behalf of ``reviewer_id``."""
        expense = await self._load(expense_id)
        reviewer = await self._users.get(reviewer_id)
        updated = workflow.review_expense(
            expense,
            reviewer,
            decision,
            now=self._clock(),
            reviewer_roles=self._reviewer_roles,
        )
        await self._persist(expense, updated, decision.value)

        logger.info(
            "expense_reviewed",
            expense_id=expense_id,
            reviewer_id=reviewer_id,
            status=updated.status.value,
        )
        return await self.get_expense(expense_id)

    async def change_status(
        self,
        expense_id: int,
        status_name: str,
        reviewed_by: int | None = None,
    ) -> ExpenseView:
        """
        Drive the workflow from a target status name.

        Submitted submits; Approved/Rejected review and require ``reviewed_by``.
        Draft is never a valid target.
        """
        target = ExpenseStatus.parse(status_name)

        if target is ExpenseStatus.SUBMITTED:
            return await self.submit(expense_id)

        if target is ExpenseStatus.DRAFT:
            expense = await self._load(expense_id)
            raise InvalidTransitionError(expense_id, expense.status.value, "move to Draft")

        if reviewed_by is None:
            raise ValidationError("reviewed_by", "required to approve or reject an expense")

        decision = ReviewDecision.APPROVE if target is ExpenseStatus.APPROVED else ReviewDecision.REJECT
        return await self.review(expense_id, reviewed_by, decision)

    async def delete(self, expense_id: int) -> bool:
        """
        Delete a Draft expense.

        Returns:
            False when the expense exists but is no longer a Draft

        Raises:
            ExpenseNotFoundError: unknown id
        """
        expense = await self._load(expense_id)
        if not workflow.can_delete(expense):
            logger.info("expense_delete_refused", expense_id=expense_id, status=expense.status.value)
            return False

        deleted = await self._expenses.delete_draft(expense_id)
        if deleted:
            logger.info("expense_deleted", expense_id=expense_id)
        return deleted

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _load(self, expense_id: int) -> Expense:
        expense = await self._expenses.get(expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    async def _persist(self, before: Expense, after: Expense, action: str) -> None:
        workflow.check_invariants(after)
        if await self._expenses.apply_transition(before, after):
            return

        # Lost a race: report against whatever the row holds now
        current = await self._expenses.get(before.id)
        if current is None:
            raise ExpenseNotFoundError(before.id)
        logger.warning(
            "expense_transition_conflict",
            expense_id=before.id,
            expected=before.status.value,
            actual=current.status.value,
        )
        raise InvalidTransitionError(before.id, current.status.value, action)
