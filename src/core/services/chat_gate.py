"""
Chat availability gate.

The assistant is an optional feature: when no AI deployment is configured
the gate answers with a fixed explanation, and when the deployment fails
it answers with a generic apology. Either way the caller gets a ChatReply
and never an exception.
"""

import asyncio
from typing import Any

from src.config import get_logger
from src.config.settings import ChatSettings
from src.core.entities.chat import ChatMessage, ChatReply
from src.core.exceptions import ChatUnavailableError, LLMResponseError, LLMTimeoutError
from src.core.interfaces.llm import IChatProvider
from src.core.services.chat_tools import ExpenseChatTools

logger = get_logger(__name__)

CHAT_NOT_CONFIGURED_MESSAGE = (
    "AI Chat is not configured. To enable it, redeploy the application with "
    "the optional GenAI resources and set the GENAI_ENDPOINT and "
    "GENAI_MODEL_NAME settings."
)

ASSISTANT_UNAVAILABLE_MESSAGE = (
    "Sorry, the assistant is unavailable right now. Please try again later."
)

EMPTY_REPLY_MESSAGE = "I'm sorry, I couldn't process that request."

SYSTEM_PROMPT = """You are a helpful AI assistant for an Expense Management System.
You can help users view, create, and manage their expenses.

Available functions:
- get_all_expenses: Retrieve all expenses
- get_expenses_by_status: Retrieve expenses by status (Draft, Submitted, Approved, Rejected)
- get_expenses_by_user: Retrieve expenses for a specific user
- create_expense: Create a new draft expense
- update_expense_status: Submit, approve or reject an expense
- get_categories: Get all expense categories
- get_users: Get all users
- get_expense_summary: Get a summary of expenses by status

Expenses move from Draft to Submitted, then to Approved or Rejected.
Only a manager other than the owner can approve or reject an expense.
When displaying expense information, format amounts with their currency (GBP by default).
Be friendly and helpful. Always confirm actions before performing them."""


def is_configured(settings: ChatSettings) -> bool:
    """True when both the endpoint and the model name are set."""
    return bool(settings.endpoint.strip()) and bool(settings.model_name.strip())


def build_messages(message: str, history: list[ChatMessage]) -> list[dict[str, Any]]:
    """System prompt, prior turns, then the new user message."""
    messages: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages.extend(turn.to_provider_dict() for turn in history)
    messages.append({"role": "user", "content": message})
    return messages


async def _converse(
    messages: list[dict[str, Any]],
    settings: ChatSettings,
    provider: IChatProvider,
    tools: ExpenseChatTools | None,
) -> str:
    """Call the provider, executing requested tools until it answers in text."""
    definitions = tools.definitions() if tools is not None and settings.enable_tools else None

    for round_number in range(settings.max_tool_rounds + 1):
        completion = await provider.chat(
            messages,
            tools=definitions,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

        if not completion.wants_tools:
            return completion.text.strip() or EMPTY_REPLY_MESSAGE

        if definitions is None:
            raise LLMResponseError("tool call requested but no tools were offered")
        if round_number == settings.max_tool_rounds:
            break

        messages.append({
            "role": "assistant",
            "content": completion.text or None,
            "tool_calls": [call.to_message_dict() for call in completion.tool_calls],
        })
        for call in completion.tool_calls:
            result = await tools.execute(call.name, call.arguments)
            messages.append({"role": "tool", "tool_call_id": call.id, "content": result})

    raise LLMResponseError(f"no answer after {settings.max_tool_rounds} tool rounds")


async def send_message(
    message: str,
    history: list[ChatMessage] | None,
    settings: ChatSettings,
    provider: IChatProvider | None = None,
    tools: ExpenseChatTools | None = None,
) -> ChatReply:
    """
    Send one user message to the assistant.

    Args:
        message: New user message
        history: Prior turns supplied by the client
        settings: Chat configuration
        provider: Chat provider, only used when chat is configured
        tools: Optional expense tools offered to the model

    Returns:
        ChatReply; ``success`` is False only for a configured assistant
        that failed
    """
    if not is_configured(settings):
        logger.info("chat_not_configured")
        return ChatReply(response=CHAT_NOT_CONFIGURED_MESSAGE, success=True)

    if provider is None:
        logger.error("chat_provider_missing")
        return ChatReply(
            response=ASSISTANT_UNAVAILABLE_MESSAGE,
            success=False,
            error="LLM_UNAVAILABLE",
        )

    messages = build_messages(message, history or [])

    try:
        text = await asyncio.wait_for(
            _converse(messages, settings, provider, tools),
            timeout=settings.timeout,
        )
    except TimeoutError:
        error = LLMTimeoutError(settings.timeout)
        logger.warning("chat_timeout", timeout=settings.timeout)
        return ChatReply(response=ASSISTANT_UNAVAILABLE_MESSAGE, success=False, error=error.code)
    except ChatUnavailableError as e:
        logger.warning("chat_unavailable", code=e.code, error=e.message)
        return ChatReply(response=ASSISTANT_UNAVAILABLE_MESSAGE, success=False, error=e.code)
    except Exception as e:
        logger.error("chat_failed", error=str(e), exc_info=True)
        return ChatReply(response=ASSISTANT_UNAVAILABLE_MESSAGE, success=False, error="CHAT_ERROR")

    logger.info("chat_answered", history_turns=len(history or []), reply_chars=len(text))
    return ChatReply(response=text, success=True)
