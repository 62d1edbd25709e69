"""
Logging utilities for safe structured logging.

Keeps log context small: embeddings and chunk lists are summarized
instead of dumped.

Dependencies: logging (stdlib), pydantic
System role: Logging helper functions
"""

import logging
from typing import Any

from pydantic import BaseModel


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Convert a value to a short string for log context.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            text = value
        elif isinstance(value, (list, tuple)):
            text = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            text = f"dict({len(value)} keys)"
        elif isinstance(value, BaseModel):
            text = f"{type(value).__name__}({', '.join(type(value).model_fields)})"
        else:
            text = str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value context
    """
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context: Any,
) -> None:
    """
    Log an exception with its type, message and context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.exception(message, extra=extra)
