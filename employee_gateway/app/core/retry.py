"""Exponential backoff for calls to the mock employee backend.

The backend throttles (429) and fails (5xx) at random, so those responses
and transport errors are retried a few times before surfacing.
"""

import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

import httpx

from employee_gateway.app.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """How often and how patiently to retry an upstream call.

    Attributes:
        max_retries: Retries after the first attempt (0 disables retrying)
        base_delay: Wait before the first retry, in seconds
        max_delay: Upper bound for any single wait
        exponential_base: Growth factor between consecutive waits
        retryable_exceptions: Exception types worth another attempt
        retryable_status_codes: Non-5xx statuses worth another attempt when
            raised as ``httpx.HTTPStatusError``

    Example:
        >>> RetryPolicy(base_delay=0.5).calculate_delay(attempt=2)
        2.0
    """

    max_retries: int = 2
    base_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_exceptions: Tuple[Type[Exception], ...] = (
        httpx.HTTPStatusError,
        httpx.NetworkError,
        httpx.TimeoutException,
    )
    retryable_status_codes: Tuple[int, ...] = (429,)

    def calculate_delay(self, attempt: int) -> float:
        """Wait before retry number ``attempt + 1``, capped at ``max_delay``."""
        return min(self.base_delay * self.exponential_base**attempt, self.max_delay)

    def is_retryable(self, exception: Exception) -> bool:
        if isinstance(exception, httpx.HTTPStatusError):
            status = exception.response.status_code
            return status >= 500 or status in self.retryable_status_codes
        return isinstance(exception, self.retryable_exceptions)


def with_retry(
    policy: Optional[RetryPolicy] = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap an async callable so retryable failures are attempted again.

    The last exception is re-raised unchanged once retries run out, and
    non-retryable exceptions are re-raised on the spot.

    Example:
        >>> send = with_retry(RetryPolicy(max_retries=3))(client.get)
        >>> response = await send(url)
    """
    retry_policy = policy or RetryPolicy()

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    reason = f"{type(e).__name__}: {e}"
                    if not retry_policy.is_retryable(e):
                        logger.debug(f"{func.__name__} failed without retry: {reason}")
                        raise
                    if attempt >= retry_policy.max_retries:
                        logger.warning(
                            f"{func.__name__} still failing after "
                            f"{retry_policy.max_retries} retries: {reason}"
                        )
                        raise

                    delay = retry_policy.calculate_delay(attempt)
                    attempt += 1
                    logger.warning(
                        f"Retry {attempt}/{retry_policy.max_retries} for {func.__name__} "
                        f"in {delay:.2f}s after {reason}"
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
