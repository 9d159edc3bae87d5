"""Chat provider infrastructure implementations."""

from src.core.interfaces.llm import IChatProvider
from src.infrastructure.llm.base import BaseChatProvider
from src.infrastructure.llm.factory import check_chat_health, create_chat_provider
from src.infrastructure.llm.openai_provider import OpenAIChatProvider

__all__ = [
    # Interface
    "IChatProvider",
    # Base
    "BaseChatProvider",
    # OpenAI-compatible
    "OpenAIChatProvider",
    # Factory
    "create_chat_provider",
    "check_chat_health",
]
