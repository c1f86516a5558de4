"""API v1 router - aggregates all domain routers."""

from fastapi import APIRouter

from stockflow.api.v1.health.router import router as health_router
from stockflow.api.v1.notifications.router import router as notifications_router

router = APIRouter(prefix="/api/v1")

router.include_router(health_router)
router.include_router(notifications_router)
