"""
Expense endpoints.

Fixed paths (``/status/...``, ``/search``, ``/summary``) are registered
before ``/{expense_id}`` so they are not captured as ids.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_expenses
from src.application.dto.requests import CreateExpenseRequest, ReviewRequest, UpdateStatusRequest
from src.application.dto.responses import ErrorResponse, ExpenseResponse, SummaryResponse
from src.core.entities import ReviewDecision
from src.core.exceptions import InvalidTransitionError
from src.core.services import ExpenseService

router = APIRouter(prefix="/api/expenses", tags=["expenses"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid request or workflow violation"},
    404: {"model": ErrorResponse, "description": "Expense not found"},
}


@router.get("", response_model=list[ExpenseResponse])
async def list_expenses(
    service: ExpenseService = Depends(get_expenses),
) -> list[ExpenseResponse]:
    """List all expenses, newest first."""
    return [ExpenseResponse.from_view(v) for v in await service.list_expenses()]


@router.get("/status/{status_name}", response_model=list[ExpenseResponse], responses=_ERRORS)
async def list_by_status(
    status_name: str,
    service: ExpenseService = Depends(get_expenses),
) -> list[ExpenseResponse]:
    """List expenses in one status (case-insensitive name)."""
    return [ExpenseResponse.from_view(v) for v in await service.list_by_status(status_name)]


@router.get("/user/{user_id}", response_model=list[ExpenseResponse], responses=_ERRORS)
async def list_by_user(
    user_id: int,
    service: ExpenseService = Depends(get_expenses),
) -> list[ExpenseResponse]:
    """List expenses owned by one user."""
    return [ExpenseResponse.from_view(v) for v in await service.list_by_user(user_id)]


@router.get("/search", response_model=list[ExpenseResponse])
async def search_expenses(
    term: str = Query(default="", max_length=200, description="Matches description or owner name"),
    service: ExpenseService = Depends(get_expenses),
) -> list[ExpenseResponse]:
    """
    Search expenses.

    Case-insensitive substring match, results in creation order.
    """
    return [ExpenseResponse.from_view(v) for v in await service.search(term)]


@router.get("/summary", response_model=list[SummaryResponse])
async def summarize_expenses(
    service: ExpenseService = Depends(get_expenses),
) -> list[SummaryResponse]:
    """Count and total per status and currency."""
    return [SummaryResponse.from_entity(s) for s in await service.summarize()]


@router.get("/{expense_id}", response_model=ExpenseResponse, responses=_ERRORS)
async def get_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expenses),
) -> ExpenseResponse:
    return ExpenseResponse.from_view(await service.get_expense(expense_id))


@router.post(
    "",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
async def create_expense(
    request: CreateExpenseRequest,
    response: Response,
    service: ExpenseService = Depends(get_expenses),
) -> ExpenseResponse:
    """Create a Draft expense."""
    view = await service.create_expense(
        user_id=request.user_id,
        category_id=request.category_id,
        amount=request.amount,
        currency=request.currency,
        expense_date=request.expense_date,
        description=request.description,
        receipt_file=request.receipt_file,
    )
    response.headers["Location"] = f"{router.prefix}/{view.expense.id}"
    return ExpenseResponse.from_view(view)


@router.patch("/{expense_id}/status", response_model=ExpenseResponse, responses=_ERRORS)
async def update_status(
    expense_id: int,
    request: UpdateStatusRequest,
    service: ExpenseService = Depends(get_expenses),
) -> ExpenseResponse:
    """
    Move an expense to a new status.

    Submitted submits a Draft; Approved and Rejected need ``reviewedBy``.
    """
    view = await service.change_status(expense_id, request.status_name, request.reviewed_by)
    return ExpenseResponse.from_view(view)


@router.post("/{expense_id}/submit", response_model=ExpenseResponse, responses=_ERRORS)
async def submit_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expenses),
) -> ExpenseResponse:
    return ExpenseResponse.from_view(await service.submit(expense_id))


@router.post("/{expense_id}/approve", response_model=ExpenseResponse, responses=_ERRORS)
async def approve_expense(
    expense_id: int,
    request: ReviewRequest,
    service: ExpenseService = Depends(get_expenses),
) -> ExpenseResponse:
    view = await service.review(expense_id, request.reviewer_id, ReviewDecision.APPROVE)
    return ExpenseResponse.from_view(view)


@router.post("/{expense_id}/reject", response_model=ExpenseResponse, responses=_ERRORS)
async def reject_expense(
    expense_id: int,
    request: ReviewRequest,
    service: ExpenseService = Depends(get_expenses),
) -> ExpenseResponse:
    view = await service.review(expense_id, request.reviewer_id, ReviewDecision.REJECT)
    return ExpenseResponse.from_view(view)


@router.delete(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERRORS,
)
async def delete_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expenses),
) -> Response:
    """Delete a Draft expense."""
    if not await service.delete(expense_id):
        current = await service.get_expense(expense_id)
        raise InvalidTransitionError(expense_id, current.expense.status.value, "delete")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
