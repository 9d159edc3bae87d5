"""
Chat provider factory.

Builds a provider from explicit settings; there is no shared instance.
"""

from src.config import get_logger
from src.config.settings import ChatSettings
from src.core.exceptions import ConfigurationError
from src.core.interfaces import ChatProviderType, HealthStatus, IChatProvider
from src.core.services.chat_gate import is_configured

logger = get_logger(__name__)


def create_chat_provider(settings: ChatSettings) -> IChatProvider | None:
    """
    Create a chat provider for ``settings``.

    Returns:
        None when chat is not configured

    Raises:
        ConfigurationError: unknown provider type
    """
    if not is_configured(settings):
        return None

    try:
        provider_type = ChatProviderType(settings.provider)
    except ValueError as e:
        raise ConfigurationError(f"Unknown chat provider: {settings.provider}") from e

    from src.infrastructure.llm.openai_provider import OpenAIChatProvider

    logger.debug("chat_provider_created", provider=provider_type.value, model=settings.model_name)
    return OpenAIChatProvider(settings)


async def check_chat_health(settings: ChatSettings) -> HealthStatus:
    """Health of the configured provider, or a not-configured status."""
    provider = create_chat_provider(settings)
    if provider is None:
        return HealthStatus(
            available=False,
            provider=settings.provider,
            error="not configured",
        )
    return await provider.check_health()
