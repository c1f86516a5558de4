"""Application events."""

from stockflow.events.bus import Event, EventBus, get_event_bus, reset_event_bus
from stockflow.events.events import (
    AnnouncementProcessedEvent,
    AppEvent,
    CheckRequestedEvent,
    CycleCompletedEvent,
)

__all__ = [
    "Event",
    "EventBus",
    "get_event_bus",
    "reset_event_bus",
    "AppEvent",
    "CheckRequestedEvent",
    "AnnouncementProcessedEvent",
    "CycleCompletedEvent",
]
