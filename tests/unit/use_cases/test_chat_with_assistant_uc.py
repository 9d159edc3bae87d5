"""Unit tests for ChatWithAssistantUseCase."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.application.dto.requests import ChatRequest, ChatTurn
from src.application.use_cases import ChatWithAssistantUseCase
from src.config.settings import ChatSettings
from src.core.entities import ChatRole
from src.core.interfaces import ChatCompletion, IChatProvider
from src.core.services.chat_gate import ASSISTANT_UNAVAILABLE_MESSAGE, CHAT_NOT_CONFIGURED_MESSAGE


@pytest.fixture
def configured() -> ChatSettings:
    return ChatSettings(endpoint="https://example.openai.azure.com", model_name="gpt-4o")


@pytest.fixture
def provider() -> AsyncMock:
    mock = AsyncMock(spec=IChatProvider)
    mock.chat.return_value = ChatCompletion(text="**2** drafts:\n- Taxi\n- Lunch", model="gpt-4o")
    return mock


class TestChatWithAssistantUseCase:
    async def test_not_configured_never_builds_provider(self):
        use_case = ChatWithAssistantUseCase(ChatSettings(endpoint="", model_name=""))

        with patch("src.application.services.get_chat_provider") as factory:
            response = await use_case.execute(ChatRequest(message="hello"))

        factory.assert_not_called()
        assert response.success is True
        assert response.response == CHAT_NOT_CONFIGURED_MESSAGE
        assert response.response_html == CHAT_NOT_CONFIGURED_MESSAGE

    async def test_renders_reply(self, configured, provider):
        use_case = ChatWithAssistantUseCase(configured, provider=provider, tools=MagicMock())

        response = await use_case.execute(ChatRequest(message="drafts?"))

        assert response.success is True
        assert response.response == "**2** drafts:\n- Taxi\n- Lunch"
        assert response.response_html == "<strong>2</strong> drafts:<br><ul><li>Taxi</li><li>Lunch</li></ul>"

    async def test_history_forwarded(self, configured, provider):
        use_case = ChatWithAssistantUseCase(configured, provider=provider, tools=MagicMock())
        request = ChatRequest(
            message="and approved?",
            history=[
                ChatTurn(role=ChatRole.USER, content="drafts?"),
                ChatTurn(role=ChatRole.ASSISTANT, content="Two."),
            ],
        )

        await use_case.execute(request)

        messages = provider.chat.await_args.args[0]
        assert [m["content"] for m in messages[1:]] == ["drafts?", "Two.", "and approved?"]

    async def test_resolves_provider_when_configured(self, configured, provider):
        use_case = ChatWithAssistantUseCase(configured, tools=MagicMock())

        with patch("src.application.services.get_chat_provider", return_value=provider) as factory:
            response = await use_case.execute(ChatRequest(message="hi"))

        factory.assert_called_once_with(configured)
        assert response.success is True

    async def test_failure_reported(self, configured, provider):
        provider.chat.side_effect = ConnectionResetError("reset by peer")
        use_case = ChatWithAssistantUseCase(configured, provider=provider, tools=MagicMock())

        response = await use_case.execute(ChatRequest(message="hi"))

        assert response.success is False
        assert response.error == "CHAT_ERROR"
        assert response.response == ASSISTANT_UNAVAILABLE_MESSAGE

    async def test_tools_skipped_when_disabled(self, provider):
        settings = ChatSettings(endpoint="https://x", model_name="gpt-4o", enable_tools=False)
        use_case = ChatWithAssistantUseCase(settings, provider=provider)

        with patch("src.application.services.get_chat_tools") as factory:
            await use_case.execute(ChatRequest(message="hi"))

        factory.assert_not_called()
        assert provider.chat.await_args.kwargs["tools"] is None
