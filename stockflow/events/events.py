"""Application event definitions."""

from dataclasses import dataclass

from stockflow.events.bus import Event


@dataclass
class AppEvent(Event):
    """Base class for all application events."""

    source: str
    correlation_id: str


@dataclass
class CheckRequestedEvent(AppEvent):
    """An announcement check was requested (startup, schedule or API)."""

    pass


@dataclass
class AnnouncementProcessedEvent(AppEvent):
    """A new announcement finished processing."""

    seq_id: str
    symbol: str
    tier: str
    watchers: int
    delivered: int
    failed: int


@dataclass
class CycleCompletedEvent(AppEvent):
    """An announcement check finished."""

    fetched_count: int
    new_count: int
    processed_count: int
    delivered_count: int
    failed_count: int
    success: bool
    error: str | None
