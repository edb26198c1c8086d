"""Bounded retry for calls to external services."""

import time
from functools import wraps
from typing import Callable, Tuple, Type, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar('T')


def retry(
    func: Callable[[], T],
    tries: int = 3,
    backoff: float = 0.01,
    multiplier: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> T:
    """
    Call ``func`` until it succeeds, at most ``tries`` times.

    Args:
        func: Callable taking no arguments
        tries: Maximum number of attempts
        backoff: Delay after the first failed attempt (seconds)
        multiplier: Factor applied to the delay after each failure,
            1.0 keeps it fixed and 2.0 doubles it
        retry_on: Exceptions that trigger another attempt, anything else
            propagates immediately

    Returns:
        The value returned by the first successful call

    Raises:
        The exception of the last attempt once all attempts failed
    """
    if tries < 1:
        raise ValueError('tries must be at least 1')

    delay = backoff
    for attempt in range(1, tries + 1):
        try:
            return func()
        except retry_on as e:
            logger.debug('Attempt failed', attempt=attempt, tries=tries, error=str(e))
            if attempt == tries:
                raise
            time.sleep(delay)
            delay *= multiplier


def retry_on_failure(
    tries: int = 3,
    backoff: float = 0.01,
    multiplier: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
):
    """Decorator form of :func:`retry`."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return retry(
                lambda: func(*args, **kwargs),
                tries=tries,
                backoff=backoff,
                multiplier=multiplier,
                retry_on=retry_on,
            )
        return wrapper
    return decorator
