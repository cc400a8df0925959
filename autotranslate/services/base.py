"""
Base class for event-driven services.

Services handle write events and return follow-up events, which the
event bus publishes in turn.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from autotranslate.core.events import Event


class Service(ABC):
    """
    Base class for services subscribed to the event bus.

    Example:
        class AuditService(Service):
            service_id = "audit"
            subscribes_to = ["document.*"]

            async def handle(self, event: Event) -> list[Event]:
                logger.info(f"{event.event_type} {event.collection}:{event.document_id}")
                return []
    """

    @property
    @abstractmethod
    def service_id(self) -> str:
        """Unique identifier for this service."""
        pass

    @property
    @abstractmethod
    def subscribes_to(self) -> list[str]:
        """
        List of event patterns this service handles.

        Supports wildcards like "document.*".
        """
        pass

    @abstractmethod
    async def handle(self, event: Event) -> list[Event]:
        """
        Handle an event and return any resulting events.

        Args:
            event: The event to process

        Returns:
            Events produced by handling this event (can be empty)
        """
        pass

    async def shutdown(self) -> None:
        """Release any resources held by the service."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.service_id})>"
