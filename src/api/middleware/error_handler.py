"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
- request_id: correlation id from the logging middleware

Server-side failures (5xx) never echo exception text back to the client.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    ChatUnavailableError,
    ConfigurationError,
    ExpenseAppError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred."

# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidTransitionError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ChatUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "EXPENSE_NOT_FOUND": "Check the expense ID and try GET /api/expenses to list expenses.",
    "USER_NOT_FOUND": "Check the user ID and try GET /api/users to list users.",
    "INVALID_TRANSITION": "Expenses move Draft -> Submitted -> Approved/Rejected. Check the current status.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "LLM_UNAVAILABLE": "The assistant is offline. Retry later.",
    "LLM_TIMEOUT": "The assistant took too long to answer. Retry later.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "This method is not allowed on this path.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions to standardized JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """Convert exception to standardized JSON response."""
        status_code = status_for(exc)
        error_code = exc.code if isinstance(exc, ExpenseAppError) else "INTERNAL_ERROR"
        request_id = getattr(request.state, "request_id", None)

        if status_code >= 500:
            logger.error(
                "unhandled_exception",
                request_id=request_id,
                path=request.url.path,
                error_type=exc.__class__.__name__,
                error=str(exc),
                traceback=traceback.format_exc(),
            )
            message = INTERNAL_ERROR_MESSAGE
        else:
            logger.info(
                "request_rejected",
                request_id=request_id,
                path=request.url.path,
                error_code=error_code,
                error=str(exc),
            )
            message = str(exc)

        error_response = ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
            request_id=request_id,
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json", by_alias=True),
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed request bodies and parameters are client errors (400)."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=_get_hint("VALIDATION_ERROR", 400),
                detail="; ".join(errors),
                path=request.url.path,
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(mode="json", by_alias=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail or "An error occurred"),
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(mode="json", by_alias=True),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    return {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
    }.get(status_code, "HTTP_ERROR")
