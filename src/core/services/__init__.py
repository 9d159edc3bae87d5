"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor
or function arguments.
"""

from src.core.services import expense_workflow
from src.core.services.chat_gate import (
    ASSISTANT_UNAVAILABLE_MESSAGE,
    CHAT_NOT_CONFIGURED_MESSAGE,
    is_configured,
    send_message,
)
from src.core.services.chat_tools import ExpenseChatTools
from src.core.services.expense_service import ExpenseService
from src.core.services.markdown_renderer import render_markdown

__all__ = [
    # Workflow policy
    "expense_workflow",
    # Expenses
    "ExpenseService",
    # Chat
    "ExpenseChatTools",
    "CHAT_NOT_CONFIGURED_MESSAGE",
    "ASSISTANT_UNAVAILABLE_MESSAGE",
    "is_configured",
    "send_message",
    # Rendering
    "render_markdown",
]
