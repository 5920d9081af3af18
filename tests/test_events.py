"""Unit tests for events.py - Lifecycle event bus."""

import asyncio
import json

import pytest

from events import EventBus, EventSubscription, EventType, ProjectEvent
from records import ProjectRecord

# ==================== EventType tests ====================


class TestEventType:
    """Tests for the EventType enum."""

    def test_values(self):
        assert EventType.CREATED.value == "CREATED"
        assert EventType.UPDATED.value == "UPDATED"
        assert EventType.DELETED.value == "DELETED"
        assert EventType.REMOVED.value == "REMOVED"

    def test_all_members(self):
        assert len(EventType) == 4


# ==================== ProjectEvent tests ====================


class TestProjectEvent:
    """Tests for the ProjectEvent dataclass."""

    @pytest.fixture
    def record(self):
        record = ProjectRecord(
            space_name="space1", display_name="proj1", description="d", name="p-id"
        )
        record.mark_observed()
        return record

    def test_from_record(self, record):
        event = ProjectEvent.from_record(EventType.CREATED, "Project", record)

        assert event.event_type is EventType.CREATED
        assert event.resource_kind == "Project"
        assert event.name == "p-id"
        assert event.space_name == "space1"
        assert "observed" not in event.record_data
        assert event.record_data["display_name"] == "proj1"
        assert event.timestamp

    def test_from_record_with_explicit_name(self, record):
        record.clear_id()

        event = ProjectEvent.from_record(
            EventType.DELETED, "Project", record, name="p-id"
        )

        assert event.name == "p-id"
        assert event.record_data["name"] == ""

    def test_to_json(self, record):
        event = ProjectEvent.from_record(EventType.UPDATED, "Project", record)

        parsed = json.loads(event.to_json())

        assert parsed["event_type"] == "UPDATED"
        assert parsed["name"] == "p-id"
        assert parsed["space_name"] == "space1"
        assert parsed["record_data"]["description"] == "d"


# ==================== EventBus tests ====================


def make_event(event_type=EventType.CREATED, name="p-id"):
    return ProjectEvent(
        event_type=event_type,
        resource_kind="Project",
        name=name,
        space_name="space1",
        record_data={},
        timestamp="2024-01-15T10:30:00+00:00",
    )


@pytest.mark.asyncio
class TestEventBus:
    """Tests for EventBus."""

    async def test_subscribe_and_receive(self):
        bus = EventBus()
        subscriber_id, subscription = bus.subscribe()
        assert isinstance(subscription, EventSubscription)
        assert bus.subscriber_count() == 1

        await bus.publish(make_event())
        event = await asyncio.wait_for(subscription.__anext__(), timeout=1)

        assert event.name == "p-id"

    async def test_filter(self):
        bus = EventBus()
        subscriber_id, subscription = bus.subscribe(
            filter_fn=lambda e: e.event_type is EventType.DELETED
        )

        await bus.publish(make_event(EventType.CREATED))
        await bus.publish(make_event(EventType.DELETED))
        bus.unsubscribe(subscriber_id)

        events = [e async for e in subscription]
        assert [e.event_type for e in events] == [EventType.DELETED]

    async def test_unsubscribe_stops_iteration(self):
        bus = EventBus()
        subscriber_id, subscription = bus.subscribe()

        bus.unsubscribe(subscriber_id)

        assert bus.subscriber_count() == 0
        assert [e async for e in subscription] == []

    async def test_unsubscribe_unknown_is_noop(self):
        bus = EventBus()
        bus.unsubscribe("missing")
        assert bus.subscriber_count() == 0

    async def test_full_queue_drops_events(self):
        bus = EventBus(queue_size=1)
        subscriber_id, subscription = bus.subscribe()

        await bus.publish(make_event(name="first"))
        await bus.publish(make_event(name="second"))

        event = await asyncio.wait_for(subscription.__anext__(), timeout=1)
        assert event.name == "first"

    async def test_publish_without_subscribers(self):
        bus = EventBus()
        await bus.publish(make_event())
        assert bus.subscriber_count() == 0

    async def test_unsubscribe_with_full_queue_stops_iteration(self):
        bus = EventBus(queue_size=1)
        subscriber_id, subscription = bus.subscribe()
        await bus.publish(make_event(name="pending"))

        bus.unsubscribe(subscriber_id)

        events = await asyncio.wait_for(_collect(subscription), timeout=1)
        assert events == []
        assert subscription.closed is True


async def _collect(subscription):
    return [e async for e in subscription]
