"""
Domain exceptions for the expense application.

Each type carries a machine-readable code; the API layer maps types to
HTTP status codes (see ``src.api.middleware.error_handler``).
"""

from typing import Any


class ExpenseAppError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation / workflow exceptions
class ValidationError(ExpenseAppError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidTransitionError(ExpenseAppError):
    """Expense workflow rule violated."""

    def __init__(self, expense_id: int | None, current_status: str, action: str):
        super().__init__(
            f"Cannot {action} expense {expense_id}: status is {current_status}",
            code="INVALID_TRANSITION",
            details={
                "expense_id": expense_id,
                "current_status": current_status,
                "action": action,
            },
        )


# Lookup exceptions
class NotFoundError(ExpenseAppError):
    """Referenced entity does not exist."""

    pass


class ExpenseNotFoundError(NotFoundError):
    """Expense not found in storage."""

    def __init__(self, expense_id: int):
        super().__init__(
            f"Expense not found: {expense_id}",
            code="EXPENSE_NOT_FOUND",
            details={"expense_id": expense_id},
        )


class UserNotFoundError(NotFoundError):
    """User not found in storage."""

    def __init__(self, user_id: int):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


# Storage exceptions
class StorageError(ExpenseAppError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Chat exceptions
class ChatUnavailableError(ExpenseAppError):
    """The AI assistant could not produce an answer.

    Never surfaces as an HTTP error: the chat gate turns it into a
    fallback reply.
    """

    pass


class LLMUnavailableError(ChatUnavailableError):
    """Chat provider is not reachable or answered with an error status."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"Chat provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(ChatUnavailableError):
    """Chat provider request timed out."""

    def __init__(self, timeout: float, operation: str = "chat"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(ChatUnavailableError):
    """Chat provider returned an unusable body."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ConfigurationError(ExpenseAppError):
    """Configuration error."""

    pass
