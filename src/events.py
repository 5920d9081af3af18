"""
Lifecycle events - in-memory pub/sub for project state transitions.

The reconciler publishes an event after each transition that changed the
remote object or the local record. Subscribers get their own queue.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, Optional, Tuple

from records import ProjectRecord

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of project lifecycle events."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"
    REMOVED = "REMOVED"  # gone remotely, dropped from local state


@dataclass
class ProjectEvent:
    """Event emitted when a project changes."""

    event_type: EventType
    resource_kind: str
    name: str
    space_name: str
    record_data: Dict[str, Any]
    timestamp: str

    def to_json(self) -> str:
        return json.dumps(
            {
                "event_type": self.event_type.value,
                "resource_kind": self.resource_kind,
                "name": self.name,
                "space_name": self.space_name,
                "record_data": self.record_data,
                "timestamp": self.timestamp,
            }
        )

    @classmethod
    def from_record(
        cls,
        event_type: EventType,
        resource_kind: str,
        record: ProjectRecord,
        name: Optional[str] = None,
    ) -> "ProjectEvent":
        """
        Create an event from a project record.

        Args:
            event_type: The type of event.
            resource_kind: Kind of the resource, e.g. 'Project'.
            record: The record after the transition.
            name: Identifier to report when the record's own has been cleared.
        """
        data = record.to_dict()
        data.pop("observed", None)
        return cls(
            event_type=event_type,
            resource_kind=resource_kind,
            name=name if name is not None else record.name,
            space_name=record.space_name,
            record_data=data,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )


class EventSubscription:
    """Stream of project events for one subscriber, ending when the bus closes it."""

    def __init__(
        self,
        queue: asyncio.Queue,
        filter_fn: Optional[Callable[[ProjectEvent], bool]] = None,
    ):
        self._queue = queue
        self._accepts = filter_fn or (lambda event: True)
        self.closed = False

    def __aiter__(self) -> AsyncIterator[ProjectEvent]:
        return self

    async def __anext__(self) -> ProjectEvent:
        while not self.closed:
            event = await self._queue.get()
            if event is None:
                self.closed = True
            elif self._accepts(event):
                return event
        raise StopAsyncIteration


class EventBus:
    """
    In-memory pub/sub event bus for project events.

    Publishing never blocks: events for a subscriber whose queue is full
    are dropped.
    """

    def __init__(self, queue_size: int = 256):
        self._queue_size = queue_size
        self._subscribers: Dict[str, asyncio.Queue] = {}

    async def publish(self, event: ProjectEvent) -> None:
        for subscriber_id, queue in list(self._subscribers.items()):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    f"Dropped {event.event_type.value} event for subscriber "
                    f"{subscriber_id}: queue full"
                )

    def subscribe(
        self,
        filter_fn: Optional[Callable[[ProjectEvent], bool]] = None,
    ) -> Tuple[str, EventSubscription]:
        """
        Subscribe to events.

        Args:
            filter_fn: Optional predicate; only matching events are yielded.

        Returns:
            A tuple of ``(subscriber_id, EventSubscription)``.
        """
        subscriber_id = str(uuid.uuid4())
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers[subscriber_id] = queue
        logger.info(f"New event subscriber: {subscriber_id}")
        return subscriber_id, EventSubscription(queue, filter_fn)

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscriber and stop its iterator."""
        queue = self._subscribers.pop(subscriber_id, None)
        if queue is not None:
            # The end marker must always fit, even at the cost of the oldest event.
            if queue.full():
                dropped = queue.get_nowait()
                logger.warning(
                    f"Dropped {dropped.event_type.value} event while closing "
                    f"subscriber {subscriber_id}"
                )
            queue.put_nowait(None)
            logger.info(f"Unsubscribed: {subscriber_id}")

    def subscriber_count(self) -> int:
        return len(self._subscribers)
