"""API routers."""

from .chat import router as chat_router
from .debug_citations import router as debug_citations_router
from .health import router as health_router
from .images import router as images_router

__all__ = [
    "chat_router",
    "debug_citations_router",
    "health_router",
    "images_router",
]
