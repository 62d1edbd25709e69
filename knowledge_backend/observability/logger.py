"""
Logger configuration.

One stdout handler with ISO timestamps; every record carries the current
request's correlation ID.

Dependencies: logging (stdlib), knowledge_backend.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from knowledge_backend.observability.correlation import get_correlation_id

NOISY_LOGGERS = ("urllib3", "pymilvus", "neo4j", "grpc")


class CorrelationIdFilter(logging.Filter):
    """Attach the correlation ID to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python logging with ISO timestamp and correlation ID.

    Args:
        level: Root log level name
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # Store drivers log every RPC at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
