"""Scheduled announcement checks."""

import asyncio
import uuid

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger
from pydantic import BaseModel, Field

from stockflow.events.bus import EventBus
from stockflow.events.events import CheckRequestedEvent


class SchedulerConfig(BaseModel):
    """Scheduler configuration."""

    interval_minutes: int = Field(ge=1, le=59)
    timezone: str = "Asia/Kolkata"

    @property
    def crontab(self) -> str:
        return f"*/{self.interval_minutes} * * * *"


class MonitorScheduler:
    """Publishes a check request every N minutes."""

    def __init__(self, event_bus: EventBus, scheduler_config: SchedulerConfig) -> None:
        """Initialize monitor scheduler.

        Args:
            event_bus: EventBus instance
            scheduler_config: Scheduler configuration
        """
        self.event_bus = event_bus
        self.scheduler_config = scheduler_config
        self.scheduler = AsyncIOScheduler(timezone=scheduler_config.timezone)
        self._running = False
        self._lock = asyncio.Lock()

    async def request_check(self, source: str = "scheduled") -> str:
        """Publish a check request.

        Args:
            source: Who asked for the check

        Returns:
            Correlation id of the request
        """
        correlation_id = f"{source}_{uuid.uuid4().hex[:12]}"
        await self.event_bus.publish(
            CheckRequestedEvent(source=source, correlation_id=correlation_id)
        )
        return correlation_id

    async def _trigger_check(self) -> None:
        """Cron job entry point."""
        await self.request_check("scheduled")

    def initialize(self) -> None:
        """Register the check job."""
        self.scheduler.add_job(
            self._trigger_check,
            trigger=CronTrigger.from_crontab(
                self.scheduler_config.crontab, timezone=self.scheduler_config.timezone
            ),
            id="announcement_check",
            name="Check NSE announcements",
            replace_existing=True,
        )

        logger.info(
            f"Scheduled announcement check: {self.scheduler_config.crontab} "
            f"({self.scheduler_config.timezone})"
        )

    async def start(self) -> None:
        """Start scheduler."""
        async with self._lock:
            if self._running:
                logger.warning("Scheduler already running")
                return

            self.scheduler.start()
            self._running = True
            logger.info("News monitoring scheduler started")

    async def stop(self) -> None:
        """Stop scheduler."""
        async with self._lock:
            if not self._running:
                return

            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("News monitoring scheduler stopped")

    def is_running(self) -> bool:
        """Check if scheduler is running.

        Returns:
            True if running, False otherwise
        """
        return self._running
