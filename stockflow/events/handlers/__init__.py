"""Event handlers for EventBus."""

from typing import Protocol

from stockflow.events.handlers.monitoring_handler import MonitoringHandler


class EventHandler(Protocol):
    """Protocol for event handlers."""

    async def initialize(self, event_bus) -> None:
        """Initialize handler with event bus."""
        ...


__all__ = [
    "EventHandler",
    "MonitoringHandler",
]
