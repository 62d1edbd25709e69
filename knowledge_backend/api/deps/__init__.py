"""API-specific dependencies."""

from .dependencies import (
    ServiceCache,
    get_answer_stream_service,
    get_chunk_storage,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_answer_stream_service",
    "get_chunk_storage",
    "get_service_cache",
    "get_settings_dependency",
]
