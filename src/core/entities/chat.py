"""
Chat entities.

Chat history lives only for the duration of a request; the client sends
prior turns along with each new message.
"""

from enum import Enum

from pydantic import BaseModel


class ChatRole(str, Enum):
    """Message sender role."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Single turn of a conversation."""

    role: ChatRole
    content: str

    def to_provider_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ChatReply(BaseModel):
    """
    Outcome of a chat exchange.

    ``success`` is False only when the assistant was configured but failed;
    ``response`` always holds text fit to show as an assistant message.
    """

    response: str
    success: bool = True
    error: str | None = None
