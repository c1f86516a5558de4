"""Business logic services."""

from stockflow.services.health_service import HealthChecker, HealthStatus, health_checker
from stockflow.services.notification_service import (
    build_cycle_dependencies,
    build_delivery_router,
)

__all__ = [
    "HealthChecker",
    "HealthStatus",
    "build_cycle_dependencies",
    "build_delivery_router",
    "health_checker",
]
