"""Event bus for check requests and cycle notifications."""

import asyncio
import contextlib
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger

E = TypeVar("E", bound="Event")
Handler = Callable[[Any], Coroutine[Any, Any, None]]


@dataclass
class Event:
    """Base class for all application events."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", datetime.now())


class EventBus:
    """Queue of pending work plus direct fan-out of notifications.

    Two ways in:

    - ``publish`` queues an event for the single worker. Queued events are
      handled strictly one after another, which keeps announcement checks
      from overlapping. It never waits for room: when the queue is full the
      event is dropped and counted.
    - ``notify`` hands an event to its subscribers right away, in the
      caller's task. Handlers use it for progress and completion events
      raised while they run on the worker, so they never wait on the queue
      they are draining.

    Subscribers of one event run concurrently and fail independently.
    """

    def __init__(self, max_pending: int = 100) -> None:
        self._queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=max_pending)
        self._subscribers: dict[type[Event], list[Handler]] = {}
        self._worker: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()
        self.dropped = 0

    @property
    def is_running(self) -> bool:
        return self._worker is not None

    @property
    def pending(self) -> int:
        """Number of queued events not yet taken by the worker."""
        return self._queue.qsize()

    async def subscribe(
        self, event_type: type[E], handler: Callable[[E], Coroutine[Any, Any, None]]
    ) -> None:
        """Register a handler for an event type."""
        async with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            handlers.append(handler)
        logger.debug(f"{handler.__name__} subscribed to {event_type.__name__} ({len(handlers)})")

    async def publish(self, event: Event) -> bool:
        """Queue an event for the worker without waiting.

        Returns:
            False if the queue was full and the event was dropped
        """
        name = event.__class__.__name__
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(f"Event queue full ({self._queue.maxsize}), dropped {name}")
            return False

        logger.debug(f"Queued {name} ({self._queue.qsize()} pending)")
        return True

    async def notify(self, event: Event) -> None:
        """Deliver an event to its subscribers now, bypassing the queue."""
        await self._dispatch(event)

    async def start(self) -> None:
        if self._worker is not None:
            logger.warning("Event bus already running")
            return

        self._worker = asyncio.create_task(self._drain())
        logger.info("Event bus started")

    async def stop(self) -> None:
        if self._worker is None:
            return

        logger.info("Stopping event bus...")
        worker, self._worker = self._worker, None
        worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await worker
        logger.info(f"Event bus stopped ({self.pending} pending, {self.dropped} dropped)")

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        await self._queue.join()

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._dispatch(event)
            finally:
                self._queue.task_done()

    async def _dispatch(self, event: Event) -> None:
        handlers = self._subscribers.get(type(event), [])
        if not handlers:
            logger.debug(f"No subscribers for {event.__class__.__name__}")
            return

        await asyncio.gather(*(self._call(handler, event) for handler in handlers))

    @staticmethod
    async def _call(handler: Handler, event: Event) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception(f"Handler {handler.__name__} failed for {event.__class__.__name__}")


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get or create EventBus singleton.

    Returns:
        EventBus instance
    """
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


async def reset_event_bus() -> None:
    """Reset EventBus singleton for test isolation."""
    global _event_bus
    if _event_bus is not None:
        await _event_bus.stop()
    _event_bus = None
