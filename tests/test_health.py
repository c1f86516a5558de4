"""Test health tracking."""

from stockflow.pipeline import CycleResult
from stockflow.services import HealthChecker, HealthStatus


def cycle(success: bool) -> CycleResult:
    return CycleResult(
        success=success,
        fetched_count=0,
        new_count=0,
        processed_count=0,
        delivered_count=0,
        failed_count=0,
        error=None if success else "feed down",
    )


def test_initial_status():
    """Test a fresh checker is healthy with no cycle."""
    checker = HealthChecker(unhealthy_threshold=2)

    assert checker.get_status() == HealthStatus.HEALTHY
    assert checker.last_cycle is None
    assert checker.get_uptime() >= 0


def test_failures_degrade_then_unhealthy():
    """Test consecutive failures move through degraded to unhealthy."""
    checker = HealthChecker(unhealthy_threshold=2)

    checker.record_cycle(cycle(False))
    assert checker.get_status() == HealthStatus.DEGRADED

    checker.record_cycle(cycle(False))
    assert checker.get_status() == HealthStatus.UNHEALTHY
    assert checker.last_cycle["error"] == "feed down"


def test_success_resets_failures():
    """Test a successful cycle clears the failure streak."""
    checker = HealthChecker(unhealthy_threshold=2)
    checker.record_cycle(cycle(False))
    checker.record_cycle(cycle(True))

    assert checker.consecutive_failures == 0
    assert checker.get_status() == HealthStatus.HEALTHY
    assert checker.last_cycle_at is not None
