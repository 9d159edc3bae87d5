"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from src.api.dependencies import get_app_settings, get_chat_settings, get_db_pool
from src.application.dto.responses import HealthResponse, ProviderHealthResponse
from src.config import Settings, get_logger
from src.config.settings import ChatSettings
from src.core.exceptions import DatabaseError
from src.core.services import is_configured
from src.infrastructure.llm import check_chat_health
from src.infrastructure.storage.sqlite import ConnectionPool

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health(
    settings: Settings = Depends(get_app_settings),
    pool: ConnectionPool = Depends(get_db_pool),
) -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    start = time.time()
    try:
        available = await pool.ping()
        error = None if available else "ping failed"
    except DatabaseError as e:
        available, error = False, e.message

    return HealthResponse(
        status="healthy" if available else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=ProviderHealthResponse(
            available=available,
            provider="sqlite",
            error=error,
            response_time_ms=(time.time() - start) * 1000,
        ),
    )


@router.get("/chat", response_model=HealthResponse)
async def chat_health(
    settings: Settings = Depends(get_app_settings),
    chat_settings: ChatSettings = Depends(get_chat_settings),
) -> HealthResponse:
    """
    Assistant health check.

    An unconfigured assistant is reported but does not make the service
    unhealthy; chat is optional.
    """
    health = await check_chat_health(chat_settings)
    if not health.available:
        logger.info("chat_health_unavailable", error=health.error)

    configured = is_configured(chat_settings)
    return HealthResponse(
        status="healthy" if health.available or not configured else "degraded",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        chat=ProviderHealthResponse(
            available=health.available,
            provider=health.provider,
            model=health.model,
            error=health.error,
            response_time_ms=health.response_time_ms,
        ),
    )
