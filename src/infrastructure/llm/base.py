"""
Base chat provider with retry.

Transient failures (timeouts, dropped connections, 429/5xx answers) are
retried with exponential backoff within a single request. Nothing is
remembered between requests.
"""

from abc import ABC
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar, cast

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config import get_logger
from src.config.settings import ChatSettings
from src.core.exceptions import LLMTimeoutError, LLMUnavailableError
from src.core.interfaces import IChatProvider

logger = get_logger(__name__)

T = TypeVar("T")


class BaseChatProvider(IChatProvider, ABC):
    """
    Base class for chat providers.

    Subclasses raise ``TimeoutError`` or ``ConnectionError`` for transient
    failures and let ``_with_retry`` map them to chat exceptions.
    """

    provider_name = "chat"

    def __init__(self, settings: ChatSettings):
        self.settings = settings

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator for the configured policy."""
        delay = self.settings.retry_delay
        return retry(
            stop=stop_after_attempt(self.settings.max_retries + 1),
            wait=wait_exponential(
                multiplier=delay,
                min=delay,
                max=delay * (self.settings.retry_multiplier**3),
            ),
            retry=retry_if_exception_type((TimeoutError, ConnectionError)),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "chat_provider_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _with_retry(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute operation with retry.

        Raises:
            LLMTimeoutError: every attempt timed out
            LLMUnavailableError: provider could not be reached
        """
        try:
            result = await self._get_retry_decorator()(operation)(*args, **kwargs)
            return cast(T, result)
        except TimeoutError:
            raise LLMTimeoutError(self.settings.timeout)
        except ConnectionError as e:
            raise LLMUnavailableError(self.provider_name, str(e))
