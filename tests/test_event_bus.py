"""Test event bus."""

import asyncio
from dataclasses import dataclass

import pytest

from stockflow.events.bus import Event, EventBus, get_event_bus, reset_event_bus


@dataclass
class SampleEvent(Event):
    """Sample event type."""

    value: int


@dataclass
class BatchEvent(Event):
    """Asks a handler to emit several sample events."""

    size: int


@pytest.mark.asyncio
async def test_event_bus_publish_subscribe():
    """Test event bus basic publish/subscribe."""
    bus = EventBus()
    received = []

    async def handler(event: SampleEvent) -> None:
        received.append(event.value)

    await bus.start()
    await bus.subscribe(SampleEvent, handler)

    await bus.publish(SampleEvent(value=42))
    await bus.join()

    assert received == [42]
    assert bus.is_running

    await bus.stop()
    assert not bus.is_running


@pytest.mark.asyncio
async def test_event_bus_error_isolation():
    """Test one subscriber error doesn't affect others."""
    bus = EventBus()
    received = []

    async def failing_handler(event: SampleEvent) -> None:
        raise Exception("Handler failed")

    async def working_handler(event: SampleEvent) -> None:
        received.append(event.value)

    await bus.start()
    await bus.subscribe(SampleEvent, failing_handler)
    await bus.subscribe(SampleEvent, working_handler)

    await bus.publish(SampleEvent(value=100))
    await bus.join()

    assert received == [100]

    await bus.stop()


@pytest.mark.asyncio
async def test_events_dispatched_one_at_a_time():
    """Test a slow handler finishes before the next event starts."""
    bus = EventBus()
    log = []

    async def slow_handler(event: SampleEvent) -> None:
        log.append(f"start {event.value}")
        await asyncio.sleep(0.02)
        log.append(f"end {event.value}")

    await bus.start()
    await bus.subscribe(SampleEvent, slow_handler)

    await bus.publish(SampleEvent(value=1))
    await bus.publish(SampleEvent(value=2))
    await bus.join()

    assert log == ["start 1", "end 1", "start 2", "end 2"]

    await bus.stop()


@pytest.mark.asyncio
async def test_event_has_creation_time():
    """Test events are stamped when created."""
    event = SampleEvent(value=1)

    assert event.created_at is not None


@pytest.mark.asyncio
async def test_event_bus_singleton():
    """Test get_event_bus returns one instance until reset."""
    await reset_event_bus()
    bus = get_event_bus()

    assert get_event_bus() is bus

    await reset_event_bus()
    assert get_event_bus() is not bus
    await reset_event_bus()


@pytest.mark.asyncio
async def test_publish_drops_when_queue_full():
    """Test publishing to a full queue returns at once and counts the drop."""
    bus = EventBus(max_pending=2)

    accepted = [await bus.publish(SampleEvent(value=i)) for i in range(3)]

    assert accepted == [True, True, False]
    assert bus.pending == 2
    assert bus.dropped == 1


@pytest.mark.asyncio
async def test_notify_from_handler_bypasses_queue():
    """Test a handler can raise many events while the worker is busy with it."""
    bus = EventBus(max_pending=1)
    received = []

    async def on_sample(event: SampleEvent) -> None:
        received.append(event.value)

    async def on_batch(event: BatchEvent) -> None:
        for value in range(event.size):
            await bus.notify(SampleEvent(value=value))

    await bus.start()
    await bus.subscribe(SampleEvent, on_sample)
    await bus.subscribe(BatchEvent, on_batch)

    await bus.publish(BatchEvent(size=50))
    await asyncio.wait_for(bus.join(), timeout=5)

    assert received == list(range(50))
    assert bus.dropped == 0

    await bus.stop()
