"""Announcement check handler."""

from loguru import logger

from stockflow.events.bus import EventBus
from stockflow.events.events import (
    AnnouncementProcessedEvent,
    CheckRequestedEvent,
    CycleCompletedEvent,
)
from stockflow.pipeline.cycle import AnnouncementOutcome, CycleDependencies, run_cycle
from stockflow.services.health_service import HealthChecker


class MonitoringHandler:
    """Runs an announcement check for every check request."""

    def __init__(self, deps: CycleDependencies, health_checker: HealthChecker) -> None:
        """Initialize monitoring handler.

        Args:
            deps: Cycle collaborators
            health_checker: Receives the outcome of every cycle
        """
        self.deps = deps
        self.health_checker = health_checker
        self.event_bus: EventBus | None = None

    async def initialize(self, event_bus: EventBus) -> None:
        """Subscribe to check events.

        Args:
            event_bus: EventBus instance
        """
        self.event_bus = event_bus
        await event_bus.subscribe(CheckRequestedEvent, self.on_check_requested)
        await event_bus.subscribe(CycleCompletedEvent, self.on_cycle_complete)
        logger.info("MonitoringHandler initialized")

    async def on_check_requested(self, event: CheckRequestedEvent) -> None:
        """Handle check requested event.

        Args:
            event: Check requested event
        """
        logger.info(f"Starting news monitoring cycle ({event.source}, {event.correlation_id})")

        async def notify_outcome(outcome: AnnouncementOutcome) -> None:
            if self.event_bus is None:
                return
            await self.event_bus.notify(
                AnnouncementProcessedEvent(
                    source=event.source,
                    correlation_id=event.correlation_id,
                    seq_id=outcome.seq_id,
                    symbol=outcome.symbol,
                    tier=outcome.tier.value,
                    watchers=outcome.watchers,
                    delivered=outcome.delivered,
                    failed=outcome.failed,
                )
            )

        result = await run_cycle(self.deps, on_outcome=notify_outcome)
        self.health_checker.record_cycle(result)

        if self.event_bus is not None:
            await self.event_bus.notify(
                CycleCompletedEvent(
                    source=event.source,
                    correlation_id=event.correlation_id,
                    fetched_count=result["fetched_count"],
                    new_count=result["new_count"],
                    processed_count=result["processed_count"],
                    delivered_count=result["delivered_count"],
                    failed_count=result["failed_count"],
                    success=result["success"],
                    error=result["error"],
                )
            )

    async def on_cycle_complete(self, event: CycleCompletedEvent) -> None:
        """Handle cycle completed event.

        Args:
            event: Cycle completed event
        """
        if event.success:
            logger.info(
                f"News monitoring cycle completed: {event.processed_count}/{event.new_count} "
                f"new announcements processed, {event.delivered_count} alerts delivered, "
                f"{event.failed_count} failed"
            )
        else:
            logger.error(f"News monitoring cycle failed: {event.error}")
