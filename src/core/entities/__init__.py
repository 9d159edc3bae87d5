"""Core domain entities."""

from src.core.entities.chat import ChatMessage, ChatReply, ChatRole
from src.core.entities.expense import (
    Expense,
    ExpenseStatus,
    ExpenseSummary,
    ExpenseView,
    ReviewDecision,
)
from src.core.entities.user import Category, StatusInfo, User

__all__ = [
    # Expense entities
    "Expense",
    "ExpenseStatus",
    "ExpenseSummary",
    "ExpenseView",
    "ReviewDecision",
    # Reference entities
    "User",
    "Category",
    "StatusInfo",
    # Chat entities
    "ChatMessage",
    "ChatReply",
    "ChatRole",
]
