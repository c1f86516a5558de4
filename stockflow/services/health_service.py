"""Health monitoring service."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from stockflow.config import config

if TYPE_CHECKING:
    from stockflow.pipeline.cycle import CycleResult


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthChecker:
    """Tracks announcement check outcomes for the health endpoints."""

    def __init__(self, unhealthy_threshold: int | None = None) -> None:
        """Initialize health checker.

        Args:
            unhealthy_threshold: Consecutive failed cycles before unhealthy
        """
        self.start_time = datetime.now()
        self.unhealthy_threshold = unhealthy_threshold or config.health.unhealthy_threshold
        self.consecutive_failures = 0
        self.last_cycle_at: datetime | None = None
        self.last_cycle: "CycleResult | None" = None

    def record_cycle(self, result: "CycleResult") -> None:
        """Record the outcome of a finished cycle.

        Args:
            result: Cycle summary
        """
        self.last_cycle_at = datetime.now()
        self.last_cycle = result
        if result["success"]:
            self.consecutive_failures = 0
        else:
            self.consecutive_failures += 1

    def get_status(self) -> HealthStatus:
        """Get current health status.

        Returns:
            HealthStatus enum value
        """
        if self.consecutive_failures >= self.unhealthy_threshold:
            return HealthStatus.UNHEALTHY
        if self.consecutive_failures > 0:
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY

    def get_uptime(self) -> float:
        """Get application uptime in seconds.

        Returns:
            Uptime in seconds
        """
        return (datetime.now() - self.start_time).total_seconds()


health_checker = HealthChecker()
