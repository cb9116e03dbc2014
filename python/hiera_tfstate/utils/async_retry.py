"""
hiera_tfstate/utils/async_retry.py

Provides a decorator to retry an async state read when it fails with a
transient (retryable) error. Errors outside `retry_on` propagate immediately.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Tuple, Type
from typing_extensions import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def async_retry(
    retries: int = 3,
    delay: float = 1.0,
    noisy: bool = True,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable[
    [Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]
]:
    """Decorates an async function to retry upon retryable failures.

    The decorated function is attempted up to `retries` times, sleeping `delay`
    seconds between attempts. Only exceptions matching `retry_on` trigger another
    attempt; the last one is re-raised once attempts are exhausted.

    Args:
        retries (int, optional):
            Maximum number of total attempts (not just failures). Defaults to 3.
        delay (float, optional):
            Delay in seconds between attempts. Defaults to 1.0.
        noisy (bool, optional):
            If True, logs a warning on each failure and an error if all attempts fail.
            Defaults to True.
        retry_on (Tuple[Type[BaseException], ...], optional):
            Exception types that are worth another attempt. Defaults to (Exception,).

    Returns:
        A decorator that, when applied to an async function, returns a wrapped
        version that retries on the given exceptions.
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, R]]
    ) -> Callable[P, Coroutine[Any, Any, R]]:
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            attempts = max(retries, 1)
            for attempt_number in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as exc:
                    if attempt_number == attempts:
                        if noisy:
                            logger.error(
                                "All %d attempts failed for %r: %s",
                                attempts,
                                func.__qualname__,
                                exc,
                            )
                        raise
                    if noisy:
                        logger.warning(
                            "Attempt %d/%d for %r failed: %s",
                            attempt_number,
                            attempts,
                            func.__qualname__,
                            exc,
                        )
                    await asyncio.sleep(delay)
            raise AssertionError("unreachable")

        return wrapper

    return decorator
