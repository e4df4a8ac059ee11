"""
Retry configuration for fund-data operations.
"""

from dataclasses import dataclass
from typing import Tuple, Type
import os

import requests

from .retry import RetryStrategy


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior"""
    max_attempts: int
    initial_delay: float
    max_delay: float
    multiplier: float
    jitter: bool
    retryable_exceptions: Tuple[Type[Exception], ...]
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL


# Network failures worth another attempt; HTTP 4xx/5xx and parse errors are not
NETWORK_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    requests.ConnectionError,
    requests.Timeout,
    ConnectionError,
    TimeoutError,
)

# Eastmoney fund endpoints
FUND_DATA_RETRY_CONFIG = RetryConfig(
    max_attempts=int(os.getenv("FUND_DATA_MAX_RETRIES", "3")),
    initial_delay=float(os.getenv("FUND_DATA_INITIAL_DELAY", "0.5")),
    max_delay=float(os.getenv("FUND_DATA_MAX_DELAY", "10.0")),
    multiplier=2.0,
    jitter=True,
    retryable_exceptions=NETWORK_EXCEPTIONS,
    strategy=RetryStrategy.EXPONENTIAL
)
