"""FastAPI dependency helpers."""

from stockflow.config import Config, config
from stockflow.monitor import AlertMonitor
from stockflow.monitor import get_monitor as _get_monitor
from stockflow.services.health_service import HealthChecker


def get_config() -> Config:
    """Get config for FastAPI dependency injection.

    Returns:
        Config singleton (module-level)
    """
    return config


def get_monitor() -> AlertMonitor:
    """Get alert monitor for FastAPI dependency injection.

    Returns:
        AlertMonitor singleton
    """
    return _get_monitor()


def get_health_checker() -> HealthChecker:
    """Get health checker for FastAPI dependency injection.

    Returns:
        HealthChecker singleton (module-level)
    """
    from stockflow.services.health_service import health_checker

    return health_checker
