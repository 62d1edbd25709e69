"""
Observability module.

Provides logging configuration, correlation ID tracking, and request
middleware.
"""

from knowledge_backend.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from knowledge_backend.observability.logger import configure_logging
from knowledge_backend.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

__all__ = [
    "CorrelationMiddleware",
    "RequestLoggingMiddleware",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
