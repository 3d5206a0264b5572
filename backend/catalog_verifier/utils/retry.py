"""Async retry utilities with exponential backoff and jitter.

Usage:
    @with_async_retry(max_attempts=3, retry_on=(httpx.HTTPStatusError,))
    async def fetch_concepts():
        return await client.post("/models/general/outputs", json=payload)
"""

import asyncio
import logging
import random
from functools import wraps
from typing import Awaitable, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(
    attempt: int,
    initial_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """Delay before retry number ``attempt`` (1-based).

    Examples:
        >>> backoff_delay(1, 1.0, 60.0, 2.0, jitter=False)
        1.0
        >>> backoff_delay(3, 1.0, 60.0, 2.0, jitter=False)
        4.0
        >>> backoff_delay(10, 1.0, 60.0, 2.0, jitter=False)
        60.0
    """
    delay = min(initial_delay * (exponential_base ** (attempt - 1)), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def with_async_retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retry_on: Tuple[Type[Exception], ...] = (Exception,),
    reraise_on: Tuple[Type[Exception], ...] = (),
):
    """Re-await the wrapped coroutine when it raises one of ``retry_on``.

    Attempt ``n`` waits ``backoff_delay(n, ...)`` seconds before the next try.
    Exceptions in ``reraise_on`` propagate on the first occurrence even when
    they also match ``retry_on``. The last failure is re-raised once
    ``max_attempts`` tries have been spent.

    Example:
        >>> @with_async_retry(
        ...     max_attempts=3,
        ...     retry_on=(httpx.HTTPStatusError, httpx.TimeoutException),
        ... )
        ... async def detect(url):
        ...     return await client.post(url)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        name = getattr(func, "__name__", "unknown")

        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except reraise_on:
                    raise
                except retry_on as exc:
                    attempt += 1
                    if attempt >= max_attempts:
                        logger.error("%s failed after %d attempts: %s", name, max_attempts, exc)
                        raise

                    delay = backoff_delay(attempt, initial_delay, max_delay, exponential_base, jitter)
                    logger.warning(
                        "%s attempt %d/%d failed, retrying in %.2fs: %s",
                        name, attempt, max_attempts, delay, exc,
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
