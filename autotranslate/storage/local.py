"""
Local storage implementations for development and tests.

In-memory implementations that work without any external services.
Stored values are copied on the way in and out so callers can never
mutate persisted state by accident.
"""

from __future__ import annotations

from typing import Any

from autotranslate.core.utils import deep_copy, utc_now
from autotranslate.storage.base import (
    DocumentStorage,
    MetadataStorage,
    StorageProvider,
)


# =============================================================================
# In-Memory Document Storage
# =============================================================================


class InMemoryDocumentStorage(DocumentStorage):
    """In-memory localized document storage."""

    def __init__(self):
        # collection -> id -> locale -> document
        self._data: dict[str, dict[str, dict[str, dict[str, Any]]]] = {}

    async def get(self, collection: str, id: str, locale: str) -> dict[str, Any] | None:
        document = self._data.get(collection, {}).get(id, {}).get(locale)
        return deep_copy(document) if document is not None else None

    async def save(self, collection: str, id: str, locale: str, data: dict[str, Any]) -> dict[str, Any]:
        versions = self._data.setdefault(collection, {}).setdefault(id, {})
        now = utc_now().isoformat()
        created_at = versions.get(locale, {}).get("createdAt", now)
        versions[locale] = {
            **deep_copy(data),
            "id": id,
            "createdAt": created_at,
            "updatedAt": now,
        }
        return deep_copy(versions[locale])

    async def delete(self, collection: str, id: str) -> bool:
        if id in self._data.get(collection, {}):
            del self._data[collection][id]
            return True
        return False

    async def locales(self, collection: str, id: str) -> list[str]:
        return list(self._data.get(collection, {}).get(id, {}).keys())


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory record storage."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        if collection not in self._data:
            self._data[collection] = {}
        self._data[collection][id] = {
            **deep_copy(data),
            "_id": id,
            "_updated_at": utc_now().isoformat(),
        }

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        record = self._data.get(collection, {}).get(id)
        return deep_copy(record) if record is not None else None

    async def delete(self, collection: str, id: str) -> bool:
        if collection in self._data and id in self._data[collection]:
            del self._data[collection][id]
            return True
        return False

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        if collection not in self._data:
            return []

        results = list(self._data[collection].values())

        # Apply filters
        if filters:
            results = [
                record for record in results
                if all(record.get(key) == value for key, value in filters.items())
            ]

        # Apply pagination
        return [deep_copy(record) for record in results[offset:offset + limit]]


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory implementations."""
    return StorageProvider(
        documents=InMemoryDocumentStorage(),
        metadata=InMemoryMetadataStorage(),
    )
