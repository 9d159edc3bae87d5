"""
OpenAI-compatible chat provider.

Talks to either an Azure OpenAI deployment or a plain OpenAI-style
``/chat/completions`` endpoint over httpx, with function tool support.
"""

import json
import time
from typing import Any

import httpx

from src.config import get_logger
from src.config.settings import ChatSettings
from src.core.exceptions import LLMResponseError, LLMUnavailableError
from src.core.interfaces import ChatCompletion, ChatProviderType, HealthStatus, ToolCall
from src.infrastructure.llm.base import BaseChatProvider

logger = get_logger(__name__)

_RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}


def _health_reason(error: Exception) -> str:
    """Short client-safe reason; the raw error only goes to the log."""
    if isinstance(error, TimeoutError):
        return "timed out"
    if isinstance(error, LLMUnavailableError):
        return error.details.get("reason") or "unavailable"
    if isinstance(error, LLMResponseError):
        return "invalid response"
    return "unreachable"


class OpenAIChatProvider(BaseChatProvider):
    """
    Chat completions over HTTP.

    Azure deployments are addressed as
    ``{endpoint}/openai/deployments/{model}/chat/completions?api-version=...``
    with an ``api-key`` header; OpenAI-style endpoints as
    ``{endpoint}/chat/completions`` with a bearer token.
    """

    def __init__(
        self,
        settings: ChatSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings)
        self.provider_type = ChatProviderType(settings.provider)
        self.provider_name = self.provider_type.value
        self.endpoint = settings.endpoint.rstrip("/")
        self.model = settings.model_name
        self._transport = transport

    @property
    def url(self) -> str:
        if self.provider_type is ChatProviderType.AZURE_OPENAI:
            return (
                f"{self.endpoint}/openai/deployments/{self.model}/chat/completions"
                f"?api-version={self.settings.api_version}"
            )
        return f"{self.endpoint}/chat/completions"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key:
            if self.provider_type is ChatProviderType.AZURE_OPENAI:
                headers["api-key"] = self.settings.api_key
            else:
                headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a completion request, translating transport failures."""
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self.url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            raise TimeoutError(str(e) or "request timed out") from e
        except httpx.TransportError as e:
            raise ConnectionError(str(e) or type(e).__name__) from e

        if response.status_code in _RETRYABLE_STATUS:
            raise ConnectionError(f"HTTP {response.status_code}")
        if response.status_code != 200:
            logger.warning(
                "chat_provider_error_response",
                provider=self.provider_name,
                status=response.status_code,
                body=response.text[:200],
            )
            raise LLMUnavailableError(self.provider_name, f"HTTP {response.status_code}")

        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise LLMResponseError("body is not JSON", response.text) from e

    async def chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        temperature: float = 0.7,
        max_tokens: int = 800,
    ) -> ChatCompletion:
        """Chat completion with message history and optional tools."""
        payload: dict[str, Any] = {
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if self.provider_type is ChatProviderType.OPENAI:
            payload["model"] = self.model
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"

        async def _do_chat() -> ChatCompletion:
            start_time = time.time()
            data = await self._post(payload)
            completion = self._parse_completion(data)

            logger.info(
                "chat_completion",
                provider=self.provider_name,
                model=completion.model,
                messages=len(messages),
                tool_calls=len(completion.tool_calls),
                finish_reason=completion.finish_reason,
                elapsed_ms=int((time.time() - start_time) * 1000),
            )
            return completion

        return await self._with_retry(_do_chat)

    def _parse_completion(self, data: dict[str, Any]) -> ChatCompletion:
        try:
            choice = data["choices"][0]
            message = choice["message"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMResponseError("missing choices", json.dumps(data)[:200]) from e

        tool_calls = []
        for call in message.get("tool_calls") or []:
            function = call.get("function") or {}
            if not call.get("id") or not function.get("name"):
                raise LLMResponseError("malformed tool call", json.dumps(call)[:200])
            tool_calls.append(
                ToolCall(
                    id=call["id"],
                    name=function["name"],
                    arguments=function.get("arguments") or "{}",
                )
            )

        usage = data.get("usage") or {}
        return ChatCompletion(
            text=message.get("content") or "",
            model=data.get("model") or self.model,
            finish_reason=choice.get("finish_reason"),
            tool_calls=tool_calls,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
        )

    async def check_health(self) -> HealthStatus:
        """Send a one-token request to confirm the deployment answers."""
        start_time = time.time()
        try:
            await self._post({
                "messages": [{"role": "user", "content": "ping"}],
                "max_tokens": 1,
                **({"model": self.model} if self.provider_type is ChatProviderType.OPENAI else {}),
            })
        except (TimeoutError, ConnectionError, LLMUnavailableError, LLMResponseError) as e:
            logger.warning("chat_health_check_failed", provider=self.provider_name, error=str(e))
            return HealthStatus(
                available=False,
                provider=self.provider_name,
                model=self.model,
                error=_health_reason(e),
            )

        return HealthStatus(
            available=True,
            provider=self.provider_name,
            model=self.model,
            response_time_ms=(time.time() - start_time) * 1000,
        )
