"""
Unit tests for retry, logging and health checks
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import json
import logging
import unittest
from datetime import datetime

from models.fund import FundRecord
from operation.healthcheck import (
    CompositeHealthCheck,
    FundDataHealthCheck,
    HealthCheck,
    HealthCheckResult,
    HealthStatus,
)
from operation.logging import (
    JsonFormatter,
    StructuredFormatter,
    get_correlation_id,
    log_performance,
    set_correlation_id,
)
from operation.logging.logging_config import CorrelationFilter
from operation.retry import RetryStrategy, calculate_backoff, retry_with_backoff
from utils.data import InMemoryFundDataProvider


class TestRetry(unittest.TestCase):
    """Test cases for the retry decorator."""

    def test_exponential_backoff(self):
        """Exponential delays grow by the multiplier and are capped."""
        self.assertEqual(calculate_backoff(1, 1.0, 10.0, 2.0, jitter=False), 1.0)
        self.assertEqual(calculate_backoff(3, 1.0, 10.0, 2.0, jitter=False), 4.0)
        self.assertEqual(calculate_backoff(3, 1.0, 3.0, 2.0, jitter=False), 3.0)

    def test_linear_and_fixed_backoff(self):
        """Linear delays grow with the attempt; fixed delays do not."""
        self.assertEqual(
            calculate_backoff(3, 1.0, 10.0, 2.0, jitter=False, strategy=RetryStrategy.LINEAR), 3.0
        )
        self.assertEqual(
            calculate_backoff(3, 1.0, 10.0, 2.0, jitter=False, strategy=RetryStrategy.FIXED), 1.0
        )

    def test_jitter_bounds(self):
        """Jitter adds at most a quarter of the delay."""
        for _ in range(20):
            delay = calculate_backoff(2, 1.0, 10.0, 2.0, jitter=True)
            self.assertGreaterEqual(delay, 2.0)
            self.assertLessEqual(delay, 2.5)

    def test_retries_until_success(self):
        """Retryable failures are retried and the result returned."""
        calls = []
        delays = []

        @retry_with_backoff(max_attempts=3, jitter=False, retryable_exceptions=(ConnectionError,),
                            sleep=delays.append)
        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("reset")
            return "ok"

        self.assertEqual(flaky(), "ok")
        self.assertEqual(len(calls), 3)
        self.assertEqual(delays, [1.0, 2.0])

    def test_exhausted_attempts_reraise(self):
        """The last error is raised once attempts run out."""
        @retry_with_backoff(max_attempts=2, retryable_exceptions=(ConnectionError,), sleep=lambda d: None)
        def always_fails():
            raise ConnectionError("down")

        with self.assertRaises(ConnectionError):
            always_fails()

    def test_non_retryable_propagates_immediately(self):
        """Errors outside the retryable set are not retried."""
        calls = []

        @retry_with_backoff(max_attempts=3, retryable_exceptions=(ConnectionError,), sleep=lambda d: None)
        def broken():
            calls.append(1)
            raise ValueError("bad payload")

        with self.assertRaises(ValueError):
            broken()
        self.assertEqual(len(calls), 1)

    def test_on_retry_callback(self):
        """The callback sees each failed attempt."""
        seen = []

        @retry_with_backoff(max_attempts=2, jitter=False, retryable_exceptions=(TimeoutError,),
                            on_retry=lambda attempt, delay, e: seen.append(attempt), sleep=lambda d: None)
        def slow():
            raise TimeoutError("slow")

        with self.assertRaises(TimeoutError):
            slow()
        self.assertEqual(seen, [1])


class TestLogging(unittest.TestCase):
    """Test cases for logging helpers."""

    def make_record(self, message="hello"):
        record = logging.LogRecord("fund.test", logging.INFO, __file__, 1, message, None, None)
        CorrelationFilter().filter(record)
        return record

    def test_correlation_id(self):
        """Correlation IDs are generated or set explicitly."""
        generated = set_correlation_id()
        self.assertEqual(get_correlation_id(), generated)
        self.assertEqual(set_correlation_id("req-1"), "req-1")
        self.assertEqual(get_correlation_id(), "req-1")

    def test_structured_formatter(self):
        """Text lines carry level, correlation ID and logger name."""
        set_correlation_id("req-2")
        line = StructuredFormatter().format(self.make_record())
        self.assertIn("[INFO] [req-2] [fund.test] hello", line)

    def test_json_formatter(self):
        """JSON lines decode to the record fields."""
        set_correlation_id("req-3")
        payload = json.loads(JsonFormatter().format(self.make_record("净值")))
        self.assertEqual(payload["correlation_id"], "req-3")
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["message"], "净值")

    def test_log_performance_preserves_result(self):
        """The timing decorator returns the wrapped result and re-raises errors."""
        @log_performance
        def add(a, b):
            return a + b

        @log_performance
        def fail():
            raise RuntimeError("boom")

        self.assertEqual(add(2, 3), 5)
        self.assertEqual(add.__name__, "add")
        with self.assertRaises(RuntimeError):
            fail()


class RaisingCheck(HealthCheck):
    def check(self) -> HealthCheckResult:
        raise RuntimeError("check crashed")

    def get_name(self) -> str:
        return "raising"


class TestHealthChecks(unittest.TestCase):
    """Test cases for health checks."""

    def setUp(self):
        """Set up test fixtures."""
        self.provider = InMemoryFundDataProvider([FundRecord(code="000003", type="bond")])

    def test_healthy_provider(self):
        """A provider returning funds is healthy."""
        result = FundDataHealthCheck(self.provider).check()
        self.assertEqual(result.status, HealthStatus.HEALTHY)
        self.assertEqual(result.details["funds_found"], 1)

    def test_empty_provider_is_degraded(self):
        """A provider returning no funds is degraded."""
        result = FundDataHealthCheck(InMemoryFundDataProvider([])).check()
        self.assertEqual(result.status, HealthStatus.DEGRADED)

    def test_failing_provider_is_unhealthy(self):
        """A provider raising FundDataError is unhealthy."""
        provider = InMemoryFundDataProvider([], failing_types=["bond"])
        result = FundDataHealthCheck(provider).check()
        self.assertEqual(result.status, HealthStatus.UNHEALTHY)
        self.assertIn("error", result.details)

    def test_composite_reports_worst_status(self):
        """The composite status is the worst individual status."""
        composite = CompositeHealthCheck([
            FundDataHealthCheck(self.provider, name="primary"),
            FundDataHealthCheck(InMemoryFundDataProvider([]), name="backup"),
        ])
        self.assertEqual(composite.get_overall_status(), HealthStatus.DEGRADED)

        report = composite.report()
        self.assertEqual(report["status"], "degraded")
        self.assertEqual(set(report["checks"]), {"primary", "backup"})
        self.assertEqual(report["checks"]["primary"]["status"], "healthy")

    def test_composite_handles_raising_check(self):
        """A check that raises is reported unhealthy."""
        results = CompositeHealthCheck([RaisingCheck()]).check_all()
        self.assertEqual(results["raising"].status, HealthStatus.UNHEALTHY)

    def test_no_checks_is_unhealthy(self):
        """No results count as unhealthy."""
        self.assertEqual(CompositeHealthCheck.overall_status({}), HealthStatus.UNHEALTHY)

    def test_result_to_dict(self):
        """Results serialize with an ISO timestamp."""
        result = HealthCheckResult(HealthStatus.HEALTHY, "ok", {}, datetime(2024, 1, 1))
        self.assertEqual(result.to_dict()["timestamp"], "2024-01-01T00:00:00")


if __name__ == '__main__':
    unittest.main()
