"""
Chat With Assistant Use Case.

Runs one chat exchange through the availability gate and renders the
reply for display.
"""

from src.application.dto.requests import ChatRequest
from src.application.dto.responses import ChatResponse
from src.config import get_logger
from src.config.settings import ChatSettings
from src.core.entities import ChatMessage
from src.core.interfaces import IChatProvider
from src.core.services import ExpenseChatTools, is_configured, render_markdown, send_message

logger = get_logger(__name__)


class ChatWithAssistantUseCase:
    """
    Use case for the expense assistant.

    The provider and tools are only built when chat is configured, so an
    unconfigured deployment never touches the AI backend.
    """

    def __init__(
        self,
        settings: ChatSettings,
        provider: IChatProvider | None = None,
        tools: ExpenseChatTools | None = None,
    ):
        self._settings = settings
        self._provider = provider
        self._tools = tools

    def _resolve_provider(self) -> IChatProvider | None:
        if self._provider is None:
            from src.application.services import get_chat_provider

            self._provider = get_chat_provider(self._settings)
        return self._provider

    def _resolve_tools(self) -> ExpenseChatTools | None:
        if not self._settings.enable_tools:
            return None
        if self._tools is None:
            from src.application.services import get_chat_tools

            self._tools = get_chat_tools()
        return self._tools

    async def execute(self, request: ChatRequest) -> ChatResponse:
        """
        Execute chat use case.

        Args:
            request: Message plus prior turns

        Returns:
            ChatResponse with raw and rendered reply
        """
        history = [ChatMessage(role=turn.role, content=turn.content) for turn in request.history]

        provider = None
        tools = None
        if is_configured(self._settings):
            provider = self._resolve_provider()
            tools = self._resolve_tools()

        reply = await send_message(
            request.message,
            history,
            self._settings,
            provider=provider,
            tools=tools,
        )

        if not reply.success:
            logger.warning("chat_fallback_reply", error=reply.error)

        return ChatResponse(
            response=reply.response,
            success=reply.success,
            error=reply.error,
            response_html=render_markdown(reply.response),
        )
