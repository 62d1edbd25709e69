"""
Async retry with exponential backoff.

Used when establishing store connections (a store may still be starting).
Writer batches are never retried here.

Dependencies: tenacity, knowledge_backend.configs
System role: Connection resilience helper
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from knowledge_backend.configs.retry import RetrySettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_before_sleep(description: str, options: RetrySettings) -> Callable[[RetryCallState], None]:
    def log(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        logger.warning(
            f"{__name__}:with_retry - {description} failed "
            f"(attempt {retry_state.attempt_number}/{options.max_retries}), "
            f"retrying in {retry_state.next_action.sleep:.2f}s",
            extra={"error_type": type(error).__name__, "error_msg": str(error)},
        )

    return log


def build_retrying(options: RetrySettings, description: str = "operation") -> AsyncRetrying:
    """
    Build the tenacity controller for a backoff policy.

    Delays are initial_delay_s * factor ** (n - 1), capped at max_delay_s.

    Args:
        options: Backoff policy
        description: Label used in log messages

    Returns:
        AsyncRetrying: Controller that re-raises the last failure
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(Exception),
        stop=stop_after_attempt(options.max_retries + 1),
        wait=wait_exponential(
            multiplier=options.initial_delay_s,
            exp_base=options.factor,
            max=options.max_delay_s,
        ),
        sleep=asyncio.sleep,
        before_sleep=_log_before_sleep(description, options),
        reraise=True,
    )


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: RetrySettings | None = None,
    description: str = "operation",
) -> T:
    """
    Run an async operation, retrying failures with exponential backoff.

    Args:
        operation: Zero-argument coroutine factory
        options: Backoff policy (defaults to RetrySettings())
        description: Label used in log messages

    Returns:
        T: Result of the first successful attempt

    Raises:
        Exception: The last failure once max_retries is exhausted
    """
    options = options or RetrySettings()

    try:
        return await build_retrying(options, description)(operation)
    except Exception as e:
        logger.error(
            f"{__name__}:with_retry - {description} failed after {options.max_retries + 1} attempts",
            extra={"error_type": type(e).__name__, "error_msg": str(e)},
        )
        raise
