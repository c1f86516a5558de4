"""Alert monitor application manager."""

import uuid

import httpx
from loguru import logger

from stockflow.config import Config, config
from stockflow.events import CheckRequestedEvent, EventBus, get_event_bus, reset_event_bus
from stockflow.events.handlers import EventHandler, MonitoringHandler
from stockflow.pipeline.cycle import CycleDependencies, CycleResult, run_cycle
from stockflow.scheduler import MonitorScheduler, SchedulerConfig
from stockflow.services import build_cycle_dependencies, health_checker
from stockflow.sources.nse import NSEAnnouncementSource
from stockflow.storage import close_database, init_database


class AlertMonitor:
    """Owns the event bus, the scheduler and the pipeline collaborators."""

    def __init__(self, app_config: Config | None = None) -> None:
        """Initialize alert monitor.

        Args:
            app_config: Configuration, defaults to the module-level config
        """
        self.config = app_config or config
        self.event_bus: EventBus | None = None
        self.scheduler: MonitorScheduler | None = None
        self.client: httpx.AsyncClient | None = None
        self.deps: CycleDependencies | None = None

    def _prepare(self) -> CycleDependencies:
        """Validate configuration and build collaborators.

        Raises:
            ConfigurationError: If required credentials are missing
        """
        self.config.validate_runtime()
        init_database(self.config.database.url, create_tables=self.config.database.create_tables)
        self.client = httpx.AsyncClient(follow_redirects=True)
        self.deps = build_cycle_dependencies(self.config, self.client)
        return self.deps

    async def start(self) -> None:
        """Start the alert monitor."""
        logger.info("Starting alert monitor...")

        try:
            deps = self._prepare()

            self.event_bus = get_event_bus()
            await self.event_bus.start()

            handlers: list[EventHandler] = [MonitoringHandler(deps, health_checker)]
            for handler in handlers:
                await handler.initialize(self.event_bus)
            logger.info(f"Event handlers initialized ({len(handlers)} handlers)")

            monitoring = self.config.monitoring
            if monitoring.enabled:
                self.scheduler = MonitorScheduler(
                    self.event_bus,
                    SchedulerConfig(
                        interval_minutes=monitoring.interval_minutes,
                        timezone=monitoring.timezone,
                    ),
                )
                self.scheduler.initialize()
                await self.scheduler.start()

            if monitoring.run_on_startup:
                await self.request_check("startup")

            logger.info("Alert monitor started successfully")

        except Exception as e:
            logger.error(f"Failed to start alert monitor: {e}")
            await self.stop()
            raise

    async def stop(self) -> None:
        """Stop the alert monitor."""
        logger.info("Stopping alert monitor...")

        try:
            if self.scheduler and self.scheduler.is_running():
                await self.scheduler.stop()

            if self.event_bus:
                await self.event_bus.stop()

            await self._close_clients()
            close_database()
            logger.info("Alert monitor stopped successfully")

        except Exception as e:
            logger.error(f"Error stopping alert monitor: {e}")

    async def _close_clients(self) -> None:
        if self.deps is not None and isinstance(self.deps.source, NSEAnnouncementSource):
            await self.deps.source.close()
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def request_check(self, source: str = "manual") -> str:
        """Queue an announcement check and return immediately.

        Args:
            source: Who asked for the check

        Returns:
            Correlation id of the request

        Raises:
            RuntimeError: If the monitor has not been started
        """
        if self.scheduler is not None:
            return await self.scheduler.request_check(source)

        if self.event_bus is None:
            raise RuntimeError("Alert monitor not started")

        correlation_id = f"{source}_{uuid.uuid4().hex[:12]}"
        await self.event_bus.publish(
            CheckRequestedEvent(source=source, correlation_id=correlation_id)
        )
        return correlation_id

    async def run_once(self) -> CycleResult:
        """Run a single check in the foreground, without bus or scheduler.

        Returns:
            CycleResult summary
        """
        deps = self._prepare()
        try:
            result = await run_cycle(deps)
            health_checker.record_cycle(result)
            return result
        finally:
            await self._close_clients()
            close_database()


_monitor: AlertMonitor | None = None


def get_monitor() -> AlertMonitor:
    """Get alert monitor instance.

    Returns:
        AlertMonitor singleton instance
    """
    global _monitor
    if _monitor is None:
        _monitor = AlertMonitor()
    return _monitor


async def reset_monitor() -> None:
    """Reset monitor singleton (for testing)."""
    global _monitor
    if _monitor is not None:
        await _monitor.stop()
    _monitor = None
    await reset_event_bus()
