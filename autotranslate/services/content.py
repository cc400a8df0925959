"""
Content write service.

Every document write goes through here: the document is persisted in its
locale and a write event is published on the bus, tagged with who made it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from autotranslate.core.events import (
    Event,
    EventBus,
    WriteOrigin,
    document_deleted,
    document_written,
)
from autotranslate.storage.base import DocumentStorage

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """What a write stored and the events it set off."""

    document: dict[str, Any]
    event: Event
    follow_ups: list[Event] = field(default_factory=list)


class ContentService:
    """
    Writes localized documents and publishes write events.

    Usage:
        content = ContentService(storage.documents, bus)
        result = await content.write("posts", "p1", {"title": "Hej"}, locale="sv")
        result.follow_ups  # translation writes for the secondary locales
    """

    def __init__(self, documents: DocumentStorage, bus: EventBus):
        self.documents = documents
        self.bus = bus

    async def read(self, collection: str, document_id: str, locale: str) -> dict[str, Any] | None:
        return await self.documents.get(collection, document_id, locale)

    async def write(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
        locale: str,
        origin: WriteOrigin = WriteOrigin.USER_INITIATED,
    ) -> WriteResult:
        """
        Create or update a document in one locale.

        The write is a create when the document does not exist in any locale.
        """
        created = not await self.documents.locales(collection, document_id)
        stored = await self.documents.save(collection, document_id, locale, data)

        event = document_written(collection, document_id, stored, locale, created=created, origin=origin)
        follow_ups = await self.bus.publish(event)
        return WriteResult(document=stored, event=event, follow_ups=follow_ups)

    async def delete(
        self,
        collection: str,
        document_id: str,
        origin: WriteOrigin = WriteOrigin.USER_INITIATED,
    ) -> bool:
        """Delete a document in every locale."""
        deleted = await self.documents.delete(collection, document_id)
        if deleted:
            await self.bus.publish(document_deleted(collection, document_id, origin=origin))
        else:
            logger.debug(f"Delete of missing document {collection}:{document_id}")
        return deleted
