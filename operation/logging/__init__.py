# logging package
from .logging_config import (
    setup_logging,
    setup_logging_from_env,
    get_logger,
    set_correlation_id,
    get_correlation_id,
    log_function_call,
    log_performance,
    JsonFormatter,
    StructuredFormatter
)

__all__ = [
    'setup_logging',
    'setup_logging_from_env',
    'get_logger',
    'set_correlation_id',
    'get_correlation_id',
    'log_function_call',
    'log_performance',
    'JsonFormatter',
    'StructuredFormatter'
]
