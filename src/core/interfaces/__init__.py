"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.llm import (
    ChatCompletion,
    ChatProviderType,
    HealthStatus,
    IChatProvider,
    ToolCall,
)
from src.core.interfaces.storage import IExpenseStore, IReferenceStore, IUserStore

__all__ = [
    # Chat interfaces
    "IChatProvider",
    "ChatProviderType",
    "ChatCompletion",
    "ToolCall",
    "HealthStatus",
    # Storage interfaces
    "IExpenseStore",
    "IUserStore",
    "IReferenceStore",
]
