"""
Reference data endpoints: categories, statuses and users.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_expenses
from src.application.dto.responses import CategoryResponse, StatusResponse, UserResponse
from src.core.services import ExpenseService

router = APIRouter(prefix="/api", tags=["reference"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    service: ExpenseService = Depends(get_expenses),
) -> list[CategoryResponse]:
    """Active expense categories."""
    return [CategoryResponse.from_entity(c) for c in await service.list_categories()]


@router.get("/statuses", response_model=list[StatusResponse])
async def list_statuses(
    service: ExpenseService = Depends(get_expenses),
) -> list[StatusResponse]:
    return [StatusResponse.from_entity(s) for s in await service.list_statuses()]


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    service: ExpenseService = Depends(get_expenses),
) -> list[UserResponse]:
    """Active users with their role and manager."""
    return [UserResponse.from_entity(u) for u in await service.list_users()]
