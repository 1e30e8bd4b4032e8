# ABOUTME: Retry policy for transient navigation failures using tenacity
# ABOUTME: Exponential backoff on NavigationError only; timeouts and extraction failures are never retried

from collections.abc import Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fuel_price_ingest.extraction.base import NavigationError
from fuel_price_ingest.utils.logging import get_logger

logger = get_logger(__name__)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Navigation failed, retrying",
        attempt=retry_state.attempt_number,
        error=str(error),
        error_type=type(error).__name__,
    )


def navigation_retry(
    max_attempts: int = 2,
    min_wait: float = 1.0,
    max_wait: float = 8.0,
    multiplier: float = 2.0,
):
    """Retry an async callable on NavigationError with exponential backoff."""

    def decorator(func: Callable):
        async def wrapper(*args, **kwargs):
            retrying = AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
                retry=retry_if_exception_type(NavigationError),
                before_sleep=_log_retry,
                reraise=True,
            )
            async for attempt in retrying:
                with attempt:
                    return await func(*args, **kwargs)

        return wrapper

    return decorator
