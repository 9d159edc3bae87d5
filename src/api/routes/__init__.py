"""API route modules."""

from src.api.routes.chat import router as chat_router
from src.api.routes.expenses import router as expenses_router
from src.api.routes.health import router as health_router
from src.api.routes.reference import router as reference_router

__all__ = [
    "health_router",
    "expenses_router",
    "reference_router",
    "chat_router",
]
