"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.base import CamelModel
from src.application.dto.requests import (
    ChatRequest,
    ChatTurn,
    CreateExpenseRequest,
    ReviewRequest,
    UpdateStatusRequest,
)
from src.application.dto.responses import (
    CategoryResponse,
    ChatResponse,
    ErrorResponse,
    ExpenseResponse,
    HealthResponse,
    ProviderHealthResponse,
    StatusResponse,
    SummaryResponse,
    UserResponse,
)

__all__ = [
    "CamelModel",
    # Requests
    "CreateExpenseRequest",
    "UpdateStatusRequest",
    "ReviewRequest",
    "ChatTurn",
    "ChatRequest",
    # Responses
    "ExpenseResponse",
    "SummaryResponse",
    "CategoryResponse",
    "StatusResponse",
    "UserResponse",
    "ChatResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
