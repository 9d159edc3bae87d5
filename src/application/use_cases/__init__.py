"""Application use cases."""

from src.application.use_cases.chat_with_assistant import ChatWithAssistantUseCase

__all__ = [
    "ChatWithAssistantUseCase",
]
