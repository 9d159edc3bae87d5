"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services. Use
cases and API dependencies should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.config import get_settings
from src.config.settings import ChatSettings
from src.core.services import ExpenseChatTools, ExpenseService

if TYPE_CHECKING:
    from src.core.interfaces import IChatProvider, IExpenseStore, IReferenceStore, IUserStore


# Singleton service instance
_expense_service: ExpenseService | None = None


def get_expense_service(
    expense_store: "IExpenseStore | None" = None,
    user_store: "IUserStore | None" = None,
    reference_store: "IReferenceStore | None" = None,
) -> ExpenseService:
    """
    Get or create ExpenseService instance.

    Overrides bypass the singleton so tests can inject fakes.

    Args:
        expense_store: Optional expense store override
        user_store: Optional user store override
        reference_store: Optional reference store override

    Returns:
        Configured ExpenseService
    """
    global _expense_service

    overridden = any(s is not None for s in (expense_store, user_store, reference_store))
    if _expense_service is not None and not overridden:
        return _expense_service

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import (
        get_expense_store,
        get_reference_store,
        get_user_store,
    )

    settings = get_settings()
    service = ExpenseService(
        expense_store=expense_store or get_expense_store(),
        user_store=user_store or get_user_store(),
        reference_store=reference_store or get_reference_store(),
        supported_currencies=settings.expenses.supported_currencies,
        default_currency=settings.expenses.default_currency,
        reviewer_roles=settings.expenses.reviewer_roles,
    )

    if not overridden:
        _expense_service = service

    return service


def get_chat_provider(settings: ChatSettings | None = None) -> "IChatProvider | None":
    """
    Build a chat provider for this request.

    Returns None when chat is not configured. Never cached, so a broken
    provider cannot affect later requests.
    """
    from src.infrastructure.llm import create_chat_provider

    return create_chat_provider(settings or get_settings().chat)


def get_chat_tools(service: ExpenseService | None = None) -> ExpenseChatTools:
    """Expense tools offered to the assistant."""
    return ExpenseChatTools(service or get_expense_service())


def reset_services() -> None:
    """
    Reset singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _expense_service
    _expense_service = None


__all__ = [
    # Factory functions
    "get_expense_service",
    "get_chat_provider",
    "get_chat_tools",
    # Reset
    "reset_services",
]
