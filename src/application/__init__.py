"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from src.application.dto import (
    CategoryResponse,
    ChatRequest,
    ChatResponse,
    CreateExpenseRequest,
    ErrorResponse,
    ExpenseResponse,
    HealthResponse,
    ReviewRequest,
    StatusResponse,
    SummaryResponse,
    UpdateStatusRequest,
    UserResponse,
)
from src.application.services import (
    get_chat_provider,
    get_chat_tools,
    get_expense_service,
    reset_services,
)
from src.application.use_cases import ChatWithAssistantUseCase

__all__ = [
    # Request DTOs
    "CreateExpenseRequest",
    "UpdateStatusRequest",
    "ReviewRequest",
    "ChatRequest",
    # Response DTOs
    "ExpenseResponse",
    "SummaryResponse",
    "CategoryResponse",
    "StatusResponse",
    "UserResponse",
    "ChatResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "ChatWithAssistantUseCase",
    # Service factories
    "get_expense_service",
    "get_chat_provider",
    "get_chat_tools",
    "reset_services",
]
