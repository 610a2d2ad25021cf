"""Retry helper for calls to the remote credential store.

Transport failures (connection resets, timeouts) are retried with
exponential backoff; HTTP error responses are not, because the store
answered and repeating the request will not change its answer.

Example:
    >>> @async_retry(max_attempts=3, exceptions=(httpx.TransportError,))
    ... async def fetch_keystore(self, full_name: str) -> AndroidKeystore | None:
    ...     ...

Backoff Formula:
    delay = base_delay * backoff_factor ** (attempt_number - 1)
    For base_delay=0.5, backoff_factor=2.0: 0.5s, 1s, 2s, ...
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


def async_retry(
    max_attempts: int = 3,
    backoff_factor: float = 2.0,
    base_delay: float = 0.5,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry an async function on the given exceptions.

    Args:
        max_attempts: Total number of calls before giving up
        backoff_factor: Multiplier applied to the delay after each failure
        base_delay: Delay in seconds before the first retry
        exceptions: Exception types that trigger a retry; anything else
            propagates immediately

    Returns:
        Decorator wrapping the coroutine function

    Raises:
        The last caught exception once all attempts are exhausted.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        log.error("retry_exhausted", function=func.__name__, attempts=attempt, error=str(e))
                        raise

                    delay = base_delay * backoff_factor ** (attempt - 1)
                    log.warning(
                        "retry_attempt",
                        function=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        delay=delay,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)

            raise RuntimeError("unreachable")

        return wrapper

    return decorator
