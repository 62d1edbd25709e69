"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .query_stream import router as query_stream_router

__all__ = [
    "documents_router",
    "health_router",
    "query_stream_router",
]
