"""
Abstract interface for chat completion providers.

Defines the contract the OpenAI-compatible implementation fulfills.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ChatProviderType(str, Enum):
    """Supported chat provider types."""

    AZURE_OPENAI = "azure_openai"
    OPENAI = "openai"


@dataclass
class ToolCall:
    """Function call requested by the model."""

    id: str
    name: str
    arguments: str = "{}"

    def to_message_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass
class ChatCompletion:
    """Response from a chat completion call."""

    text: str
    model: str
    finish_reason: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)


@dataclass
class HealthStatus:
    """Chat provider health status."""

    available: bool
    provider: str
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class IChatProvider(ABC):
    """
    Abstract interface for chat providers.

    Implementations: OpenAIChatProvider
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        temperature: float = 0.7,
        max_tokens: int = 800,
    ) -> ChatCompletion:
        """
        Chat completion with message history.

        Args:
            messages: List of {"role": "system"|"user"|"assistant"|"tool", ...}
            tools: Optional function tool definitions
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            ChatCompletion with assistant reply or tool calls
        """
        pass

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Report whether the provider can be reached."""
        pass
