"""
Bounded Retry for Parse Attempts

One parse attempt = build request -> call gateway -> extract -> validate.
Models occasionally return prose, truncated JSON or an empty message, and
a second identical request usually succeeds.

Policy:
- At most MAX_PARSE_ATTEMPTS attempts
- Any exception triggers the retry (network, empty, JSON, schema alike)
- No wait between attempts, the request is not changed
- The last attempt's exception propagates to the caller

Each call builds its own AsyncRetrying, so concurrent parses share no
retry state.
"""

from typing import Awaitable, Callable, TypeVar

import structlog
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_none

logger = structlog.get_logger(__name__)

MAX_PARSE_ATTEMPTS = 2

T = TypeVar("T")


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "parse_attempt_failed",
        attempt=retry_state.attempt_number,
        max_attempts=MAX_PARSE_ATTEMPTS,
        error_type=type(error).__name__ if error else None,
        error=str(error) if error else None,
    )


async def run_with_retry(attempt: Callable[[], Awaitable[T]]) -> T:
    """
    Run a parse attempt, retrying once on any failure.

    Args:
        attempt: Zero-argument coroutine factory, called once per attempt

    Returns:
        The first successful attempt's result

    Raises:
        Exception: Whatever the final attempt raised
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(MAX_PARSE_ATTEMPTS),
        wait=wait_none(),
        after=_log_failed_attempt,
        reraise=True,
    )
    return await retrying(attempt)
