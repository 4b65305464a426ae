"""API routers."""

from .catalog import router as catalog_router
from .chat import router as chat_router
from .events import router as events_router
from .health import router as health_router
from .sessions import router as sessions_router

__all__ = [
    "catalog_router",
    "chat_router",
    "events_router",
    "health_router",
    "sessions_router",
]
