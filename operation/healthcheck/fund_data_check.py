"""
Fund-data provider health check.
"""

import time
from datetime import datetime

from operation.healthcheck.health_check import HealthCheck, HealthCheckResult, HealthStatus
from utils.data.fund_provider import FundDataProvider
from utils.errors import FundDataError

SLOW_RESPONSE_MS = 3000


class FundDataHealthCheck(HealthCheck):
    """Health check for a fund-data provider"""

    def __init__(self, provider: FundDataProvider, probe_type: str = "bond", name: str = "fund_data"):
        """
        Args:
            provider: Provider to probe
            probe_type: Fund category searched by the probe
            name: Name reported for this check
        """
        self.provider = provider
        self.probe_type = probe_type
        self.name = name

    def get_name(self) -> str:
        return self.name

    def check(self) -> HealthCheckResult:
        """Search one category and grade the provider on result and latency"""
        start_time = time.time()

        try:
            funds = self.provider.search_by_type(self.probe_type)
        except (FundDataError, OSError) as e:
            return HealthCheckResult(
                status=HealthStatus.UNHEALTHY,
                message=f"Fund data provider check failed: {e}",
                details={"error": str(e), "probe_type": self.probe_type},
                timestamp=datetime.now()
            )

        response_time = (time.time() - start_time) * 1000
        details = {
            "response_time_ms": response_time,
            "probe_type": self.probe_type,
            "funds_found": len(funds)
        }

        if not funds:
            return HealthCheckResult(
                status=HealthStatus.DEGRADED,
                message="Fund data provider returned no funds",
                details=details,
                timestamp=datetime.now(),
                response_time_ms=response_time
            )

        if response_time > SLOW_RESPONSE_MS:
            return HealthCheckResult(
                status=HealthStatus.DEGRADED,
                message="Fund data provider is slow",
                details=details,
                timestamp=datetime.now(),
                response_time_ms=response_time
            )

        return HealthCheckResult(
            status=HealthStatus.HEALTHY,
            message="Fund data provider is available",
            details=details,
            timestamp=datetime.now(),
            response_time_ms=response_time
        )
