"""
Storage abstraction layer.

All persistence goes through these interfaces: the host content store
(localized documents) and plugin metadata (exclusion records, translation
settings). This allows swapping implementations without changing the
translation code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Storage Interfaces
# =============================================================================


class DocumentStorage(ABC):
    """
    Localized content documents, one version per (collection, id, locale).

    Stands in for the host content-management framework's persistence.
    """

    @abstractmethod
    async def get(self, collection: str, id: str, locale: str) -> dict[str, Any] | None:
        """Get a document in one locale, or None if it does not exist."""
        pass

    @abstractmethod
    async def save(self, collection: str, id: str, locale: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create or replace a document in one locale; return what was stored."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document in every locale."""
        pass

    @abstractmethod
    async def locales(self, collection: str, id: str) -> list[str]:
        """Locales in which a document exists."""
        pass


class MetadataStorage(ABC):
    """
    Storage for plugin records (exclusions, settings).
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a record to a collection."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a record by ID."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a record."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query records with optional equality filters."""
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for all storage backends.

    Initialize once at startup with appropriate implementations.
    Services receive this and use the interfaces without knowing
    the underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    documents: DocumentStorage
    metadata: MetadataStorage
