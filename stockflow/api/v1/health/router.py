"""Health check endpoint for monitoring."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from stockflow import __version__
from stockflow.container import get_health_checker
from stockflow.services.health_service import HealthChecker, HealthStatus

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: HealthStatus
    timestamp: datetime
    last_cycle_at: datetime | None
    consecutive_failures: int
    uptime_seconds: float
    version: str


@router.get("", response_model=HealthResponse)
async def health_check(
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint.

    Returns:
        HealthResponse with current status
    """
    return HealthResponse(
        status=checker.get_status(),
        timestamp=datetime.now(),
        last_cycle_at=checker.last_cycle_at,
        consecutive_failures=checker.consecutive_failures,
        uptime_seconds=checker.get_uptime(),
        version=__version__,
    )


@router.get("/ready")
async def readiness_check(
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> dict[str, bool | HealthStatus]:
    """Readiness check endpoint.

    Returns:
        Dictionary indicating readiness status

    Raises:
        HTTPException: If recent cycles keep failing
    """
    health_status = checker.get_status()

    if health_status == HealthStatus.UNHEALTHY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service unhealthy: {checker.consecutive_failures} consecutive failed cycles",
        )

    return {"ready": True, "status": health_status}


@router.get("/live")
async def liveness_check(
    checker: HealthChecker = Depends(get_health_checker),  # noqa: B008
) -> dict[str, bool | float]:
    """Liveness check endpoint.

    Returns:
        Dictionary indicating liveness status
    """
    return {"alive": True, "uptime_seconds": checker.get_uptime()}
