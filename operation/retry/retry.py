"""
Retry with backoff for calls to external fund-data services.
"""

import time
import random
import functools
from typing import Callable, Type, Tuple, Optional, TYPE_CHECKING
from enum import Enum
import logging

if TYPE_CHECKING:
    from .retry_config import RetryConfig

logger = logging.getLogger(__name__)


class RetryStrategy(Enum):
    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"


def calculate_backoff(
    attempt: int,
    initial_delay: float,
    max_delay: float,
    multiplier: float,
    jitter: bool = True,
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL
) -> float:
    """
    Calculate the delay before the next attempt.

    Args:
        attempt: Attempt that just failed (1-indexed)
        initial_delay: Delay after the first failure, in seconds
        max_delay: Upper bound on the delay before jitter, in seconds
        multiplier: Growth factor for exponential backoff
        jitter: Add up to 25% random delay
        strategy: Retry strategy (exponential, linear, fixed)

    Returns:
        Delay in seconds
    """
    if strategy == RetryStrategy.EXPONENTIAL:
        delay = initial_delay * (multiplier ** (attempt - 1))
    elif strategy == RetryStrategy.LINEAR:
        delay = initial_delay * attempt
    else:
        delay = initial_delay

    delay = min(delay, max_delay)

    if jitter:
        delay += delay * 0.25 * random.random()

    return delay


def retry_with_backoff(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    multiplier: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable] = None,
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL,
    sleep: Callable[[float], None] = time.sleep
):
    """
    Decorator retrying a function with backoff.

    Exceptions outside ``retryable_exceptions`` propagate immediately; the
    last retryable exception is re-raised once attempts are exhausted.

    Args:
        max_attempts: Total number of attempts
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        multiplier: Backoff multiplier
        jitter: Add random jitter between attempts
        retryable_exceptions: Exception types that trigger a retry
        on_retry: Optional callback ``(attempt, delay, exception)``
        strategy: Retry strategy (exponential, linear, fixed)
        sleep: Sleep function, replaceable in tests
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    last_exception = e

                    if attempt < max_attempts:
                        delay = calculate_backoff(
                            attempt, initial_delay, max_delay, multiplier, jitter, strategy
                        )
                        logger.warning(
                            f"{func.__name__} failed (attempt {attempt}/{max_attempts}): {e}. "
                            f"Retrying in {delay:.2f}s..."
                        )
                        if on_retry:
                            on_retry(attempt, delay, e)
                        sleep(delay)
                    else:
                        logger.error(f"{func.__name__} failed after {max_attempts} attempts: {e}")

            raise last_exception

        return wrapper
    return decorator


def retry_from_config(config: "RetryConfig", **overrides) -> Callable:
    """Build a retry decorator from a RetryConfig."""
    options = dict(
        max_attempts=config.max_attempts,
        initial_delay=config.initial_delay,
        max_delay=config.max_delay,
        multiplier=config.multiplier,
        jitter=config.jitter,
        retryable_exceptions=config.retryable_exceptions,
        strategy=config.strategy,
    )
    options.update(overrides)
    return retry_with_backoff(**options)
