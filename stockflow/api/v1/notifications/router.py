"""API v1 notification endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from pydantic import BaseModel

from stockflow.config import Config
from stockflow.container import get_config, get_health_checker, get_monitor
from stockflow.monitor import AlertMonitor
from stockflow.services.health_service import HealthChecker

router = APIRouter(prefix="/notifications", tags=["notifications"])


class CheckTriggerResponse(BaseModel):
    """Response model for check trigger."""

    success: bool
    message: str
    correlation_id: str


class LastCycleResponse(BaseModel):
    """Summary of the most recent cycle."""

    finished_at: datetime
    success: bool
    fetched_count: int
    new_count: int
    processed_count: int
    delivered_count: int
    failed_count: int
    error: str | None


class MonitoringStatusResponse(BaseModel):
    """Response model for monitoring status."""

    enabled: bool
    interval_minutes: int
    timezone: str
    scheduler_running: bool
    last_cycle: LastCycleResponse | None


@router.post("/check", response_model=CheckTriggerResponse)
async def trigger_check(monitor: AlertMonitor = Depends(get_monitor)) -> CheckTriggerResponse:  # noqa: B008
    """Queue an announcement check and return without waiting for it."""
    logger.info("[API] Notification check triggered")

    try:
        correlation_id = await monitor.request_check("manual")
    except RuntimeError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    return CheckTriggerResponse(
        success=True,
        message="Notification check started",
        correlation_id=correlation_id,
    )


@router.get("/status", response_model=MonitoringStatusResponse)
async def get_monitoring_status(
    app_config: Config = Depends(get_config),  # noqa: B008
    monitor: AlertMonitor = Depends(get_monitor),  # noqa: B008
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> MonitoringStatusResponse:
    """Get monitoring status and the last cycle summary."""
    last_cycle = None
    if checker.last_cycle is not None and checker.last_cycle_at is not None:
        last_cycle = LastCycleResponse(finished_at=checker.last_cycle_at, **checker.last_cycle)

    return MonitoringStatusResponse(
        enabled=app_config.monitoring.enabled,
        interval_minutes=app_config.monitoring.interval_minutes,
        timezone=app_config.monitoring.timezone,
        scheduler_running=monitor.scheduler is not None and monitor.scheduler.is_running(),
        last_cycle=last_cycle,
    )
