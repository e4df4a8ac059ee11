# healthcheck package
from .health_check import (
    HealthCheck,
    HealthCheckResult,
    HealthStatus,
    CompositeHealthCheck
)
from .fund_data_check import FundDataHealthCheck

__all__ = [
    'HealthCheck',
    'HealthCheckResult',
    'HealthStatus',
    'CompositeHealthCheck',
    'FundDataHealthCheck'
]
