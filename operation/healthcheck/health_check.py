"""
Health check framework for external dependencies of the fund analytics
services.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Health status enumeration"""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheckResult:
    """Result of a health check"""
    status: HealthStatus
    message: str
    details: Dict[str, Any]
    timestamp: datetime
    response_time_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "response_time_ms": self.response_time_ms,
        }


class HealthCheck(ABC):
    """Base class for health checks"""

    @abstractmethod
    def check(self) -> HealthCheckResult:
        """Perform health check"""

    @abstractmethod
    def get_name(self) -> str:
        """Get health check name"""


class CompositeHealthCheck:
    """Runs several health checks and reduces them to one status"""

    def __init__(self, checks: List[HealthCheck]):
        """
        Args:
            checks: Health check instances to run
        """
        self.checks = checks

    def check_all(self) -> Dict[str, HealthCheckResult]:
        """
        Run all health checks. A check that raises is reported unhealthy.

        Returns:
            Dictionary mapping check names to results
        """
        results = {}
        for check in self.checks:
            try:
                results[check.get_name()] = check.check()
            except Exception as e:
                logger.error(f"Health check {check.get_name()} raised: {e}", exc_info=True)
                results[check.get_name()] = HealthCheckResult(
                    status=HealthStatus.UNHEALTHY,
                    message=f"Health check failed: {e}",
                    details={"error": str(e)},
                    timestamp=datetime.now()
                )
        return results

    @staticmethod
    def overall_status(results: Dict[str, HealthCheckResult]) -> HealthStatus:
        """Worst status among results; no results counts as unhealthy."""
        if not results:
            return HealthStatus.UNHEALTHY

        statuses = [result.status for result in results.values()]
        if HealthStatus.UNHEALTHY in statuses:
            return HealthStatus.UNHEALTHY
        if HealthStatus.DEGRADED in statuses:
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY

    def get_overall_status(self) -> HealthStatus:
        """Run all checks and return the overall status."""
        return self.overall_status(self.check_all())

    def report(self) -> Dict[str, Any]:
        """Run all checks and return a JSON-ready report."""
        results = self.check_all()
        return {
            "status": self.overall_status(results).value,
            "checks": {name: result.to_dict() for name, result in results.items()},
        }
