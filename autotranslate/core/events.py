"""
Write events and the event bus.

Every document write is published as an event carrying the collection,
document, locale, data and an origin tag. The origin tag is what stops
translation writes from triggering translation again: writes made by the
sync orchestrator are tagged ``SYNC_GENERATED`` and skipped by its gate.
"""

from __future__ import annotations

import fnmatch
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

# Type for event handlers
EventHandler = Callable[["Event"], Awaitable[list["Event"]]]


class WriteOrigin(str, Enum):
    """Who triggered a write."""

    USER_INITIATED = "user"
    SYNC_GENERATED = "sync"


class WriteOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


DOCUMENT_CREATED = "document.created"
DOCUMENT_UPDATED = "document.updated"
DOCUMENT_DELETED = "document.deleted"

_OPERATIONS = {
    DOCUMENT_CREATED: WriteOperation.CREATE,
    DOCUMENT_UPDATED: WriteOperation.UPDATE,
    DOCUMENT_DELETED: WriteOperation.DELETE,
}


@dataclass
class Event:
    """
    A document write event.

    Events are immutable records of something that happened. They carry
    all the context needed for handlers to process them.
    """

    event_type: str  # e.g., "document.updated"
    collection: str
    document_id: str
    locale: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    origin: WriteOrigin = WriteOrigin.USER_INITIATED

    # Tracing
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    causation_id: str | None = None  # Event that caused this one

    # Timing
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def operation(self) -> WriteOperation | None:
        return _OPERATIONS.get(self.event_type)

    def caused_by(self, parent: Event) -> Event:
        """Return a copy of this event linked to the event that caused it."""
        return Event(
            event_type=self.event_type,
            collection=self.collection,
            document_id=self.document_id,
            locale=self.locale,
            data=self.data,
            origin=self.origin,
            causation_id=parent.id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize event to dictionary."""
        return {
            "id": self.id,
            "event_type": self.event_type,
            "collection": self.collection,
            "document_id": self.document_id,
            "locale": self.locale,
            "data": self.data,
            "origin": self.origin.value,
            "causation_id": self.causation_id,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Deserialize event from dictionary."""
        return cls(
            id=data["id"],
            event_type=data["event_type"],
            collection=data["collection"],
            document_id=data["document_id"],
            locale=data.get("locale"),
            data=data.get("data", {}),
            origin=WriteOrigin(data.get("origin", WriteOrigin.USER_INITIATED.value)),
            causation_id=data.get("causation_id"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


def document_written(
    collection: str,
    document_id: str,
    data: dict[str, Any],
    locale: str | None,
    created: bool,
    origin: WriteOrigin = WriteOrigin.USER_INITIATED,
) -> Event:
    """Create a document.created / document.updated event."""
    return Event(
        event_type=DOCUMENT_CREATED if created else DOCUMENT_UPDATED,
        collection=collection,
        document_id=document_id,
        locale=locale,
        data=data,
        origin=origin,
    )


def document_deleted(
    collection: str,
    document_id: str,
    origin: WriteOrigin = WriteOrigin.USER_INITIATED,
) -> Event:
    """Create a document.deleted event."""
    return Event(
        event_type=DOCUMENT_DELETED,
        collection=collection,
        document_id=document_id,
        origin=origin,
    )


# =============================================================================
# Event Bus
# =============================================================================


@dataclass
class Subscription:
    """A subscription to events matching a pattern."""

    pattern: str  # e.g., "document.*" or "document.deleted"
    handler: EventHandler
    collections: set[str] | None = None  # None = every collection

    def matches(self, event: Event) -> bool:
        """Check if this subscription matches the given event."""
        if not fnmatch.fnmatch(event.event_type, self.pattern):
            return False
        return self.collections is None or event.collection in self.collections


class EventBus:
    """
    In-memory event bus.

    Handlers run one after another in subscription order and may return
    follow-up events, which are published in turn. A failing handler is
    logged and does not stop the others.
    """

    def __init__(self, max_history: int = 1000):
        self._subscriptions: list[Subscription] = []
        self._event_history: list[Event] = []
        self._max_history = max_history

    def subscribe(
        self,
        pattern: str,
        handler: EventHandler,
        collections: set[str] | None = None,
    ) -> Subscription:
        """
        Subscribe to events matching a pattern.

        Args:
            pattern: Event type pattern (supports wildcards like "document.*")
            handler: Async function to handle matching events
            collections: Only deliver events for these collections

        Returns:
            The subscription object (can be used to unsubscribe)
        """
        subscription = Subscription(pattern=pattern, handler=handler, collections=collections)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription."""
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def publish(self, event: Event) -> list[Event]:
        """
        Publish an event and return every event produced by the cascade.
        """
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]

        matching = [s for s in self._subscriptions if s.matches(event)]

        produced: list[Event] = []
        for subscription in matching:
            try:
                produced.extend(await subscription.handler(event))
            except Exception:
                logger.exception(
                    f"Error in event handler for {event.event_type} "
                    f"({event.collection}:{event.document_id})"
                )

        cascade: list[Event] = []
        for follow_up in produced:
            cascade.extend(await self.publish(follow_up))

        return produced + cascade

    def get_history(
        self,
        event_type: str | None = None,
        collection: str | None = None,
        limit: int = 100,
    ) -> list[Event]:
        """Query event history with optional filters."""
        results = self._event_history

        if event_type:
            results = [e for e in results if fnmatch.fnmatch(e.event_type, event_type)]

        if collection:
            results = [e for e in results if e.collection == collection]

        return results[-limit:]
