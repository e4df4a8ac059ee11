# retry package
from .retry import retry_with_backoff, retry_from_config, RetryStrategy, calculate_backoff
from .retry_config import RetryConfig, FUND_DATA_RETRY_CONFIG, NETWORK_EXCEPTIONS

__all__ = [
    'retry_with_backoff',
    'retry_from_config',
    'RetryStrategy',
    'calculate_backoff',
    'RetryConfig',
    'FUND_DATA_RETRY_CONFIG',
    'NETWORK_EXCEPTIONS'
]
