"""Caller-side retry with exponential backoff for Bitbucket rate limits.

The request executor never retries. Callers that want to ride out 429
responses wrap their calls with retry_on_rate_limit, which backs off 1s, 2s,
4s and fails fast for every other error.
"""

import time
import logging
from typing import Callable, TypeVar
from functools import wraps

from .errors import RateLimitExceededError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Retry function on 429 rate limit with exponential backoff.

    Executes the given function with the provided arguments, retrying up to 3 times
    with exponential backoff (1s, 2s, 4s) when the server answers 429.
    Fails fast for all other errors.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        RateLimitExceededError: If rate limit persists after 3 retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> webhook = retry_on_rate_limit(client.register_webhook, request)
    """
    for retry_num in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"Rate limit persisted after {MAX_RETRIES} retries, giving up"
                )
                raise RateLimitExceededError(MAX_RETRIES) from e

            wait_time = 2 ** retry_num
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise RateLimitExceededError(MAX_RETRIES)


def as_decorator(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator version of retry_on_rate_limit.

    Example:
        >>> @as_decorator
        ... def register(request):
        ...     return client.register_webhook(request)
    """
    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        return retry_on_rate_limit(func, *args, **kwargs)

    return wrapper


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception is an HTTP 429 response."""
    return getattr(exception, 'status_code', None) == 429
