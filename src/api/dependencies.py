"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests replace these through
``app.dependency_overrides``.
"""

from fastapi import Depends

from src.application.services import get_chat_tools, get_expense_service
from src.application.use_cases import ChatWithAssistantUseCase
from src.config import Settings, get_settings
from src.config.settings import ChatSettings
from src.core.services import ExpenseService
from src.infrastructure.storage.sqlite import ConnectionPool, get_pool


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


def get_chat_settings(settings: Settings = Depends(get_app_settings)) -> ChatSettings:
    return settings.chat


def get_expenses() -> ExpenseService:
    """Get expense service."""
    return get_expense_service()


def get_chat_use_case(
    settings: ChatSettings = Depends(get_chat_settings),
    expenses: ExpenseService = Depends(get_expenses),
) -> ChatWithAssistantUseCase:
    """Chat use case built fresh for each request; the provider is never shared."""
    return ChatWithAssistantUseCase(settings, tools=get_chat_tools(expenses))


async def get_db_pool() -> ConnectionPool:
    """Get the global SQLite connection pool."""
    return await get_pool()
