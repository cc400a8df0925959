"""
Exclusion store.

One record per (collection, document, locale) holding the ordered list of
field paths an editor has pinned for that locale. Reads degrade to an
empty list when storage fails; writes log and re-raise.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from autotranslate.core.exclusions import is_path_excluded
from autotranslate.core.paths import to_dotted
from autotranslate.core.utils import generate_id
from autotranslate.storage.base import MetadataStorage

logger = logging.getLogger(__name__)


class ExclusionRecord(BaseModel):
    """Excluded paths for one document in one locale."""

    id: str = Field(default_factory=lambda: generate_id("excl"))
    collection: str
    document_id: str
    locale: str
    excluded_paths: list[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> ExclusionRecord:
        paths = []
        for entry in record.get("excluded_paths") or []:
            # Older records stored {"path": "..."} entries
            path = entry.get("path") if isinstance(entry, dict) else entry
            if path:
                paths.append(path)
        return cls(
            id=record.get("id") or record["_id"],
            collection=record["collection"],
            document_id=record["document_id"],
            locale=record["locale"],
            excluded_paths=paths,
        )


class ExclusionStore:
    """
    Per-document, per-locale exclusion records.

    Usage:
        store = ExclusionStore(storage.metadata)

        await store.toggle("posts", "p1", "en", "seo.metaTitle", exclude=True)
        await store.get_exclusions("posts", "p1", "en")
        # ["seo.metaTitle"]

    Toggling is read-modify-write; concurrent toggles on the same
    (collection, document, locale) can race.
    """

    def __init__(
        self,
        storage: MetadataStorage,
        slug: str = "translation-exclusions",
        debugging: bool = False,
    ):
        self.storage = storage
        self.slug = slug
        self.debugging = debugging

    async def find(self, collection: str, document_id: str, locale: str) -> ExclusionRecord | None:
        """The record for a triple, or None. Storage errors propagate."""
        records = await self.storage.query(
            self.slug,
            filters={"collection": collection, "document_id": document_id, "locale": locale},
            limit=1,
        )
        if not records:
            return None
        return ExclusionRecord.from_record(records[0])

    async def get_exclusions(self, collection: str, document_id: str, locale: str) -> list[str]:
        """Excluded paths in insertion order; empty when none or on storage failure."""
        try:
            record = await self.find(collection, document_id, locale)
        except Exception as e:
            if self.debugging:
                logger.warning(
                    f"[Auto-Translate] Could not fetch exclusions for "
                    f"{collection}:{document_id} ({locale}): {e}"
                )
            return []
        return record.excluded_paths if record else []

    async def set_exclusions(
        self,
        collection: str,
        document_id: str,
        locale: str,
        paths: list[str],
    ) -> ExclusionRecord:
        """
        Replace the excluded paths of a triple.

        Updates the existing record if there is one, otherwise creates it,
        so a triple never has more than one record.
        """
        unique: list[str] = []
        for path in paths:
            if path and path not in unique:
                unique.append(path)

        try:
            record = await self.find(collection, document_id, locale)
            if record is None:
                record = ExclusionRecord(collection=collection, document_id=document_id, locale=locale)
            record.excluded_paths = unique
            await self.storage.save(self.slug, record.id, record.model_dump())
        except Exception as e:
            logger.error(
                f"[Auto-Translate] Could not save exclusions for "
                f"{collection}:{document_id} ({locale}): {e}"
            )
            raise

        if self.debugging:
            logger.info(
                f"[Auto-Translate] Exclusions for {collection}:{document_id} ({locale}): {unique}"
            )
        return record

    async def toggle(
        self,
        collection: str,
        document_id: str,
        locale: str,
        path: str,
        exclude: bool,
    ) -> list[str]:
        """Add or remove one path; returns the resulting list."""
        current = await self.get_exclusions(collection, document_id, locale)
        normalized = to_dotted(path)

        if exclude:
            paths = current if normalized in current else [*current, normalized]
        else:
            paths = [p for p in current if to_dotted(p) != normalized]

        record = await self.set_exclusions(collection, document_id, locale, paths)
        return record.excluded_paths

    async def is_excluded(self, collection: str, document_id: str, locale: str, path: str) -> bool:
        """Whether ``path`` or an ancestor is excluded (index-agnostic)."""
        paths = await self.get_exclusions(collection, document_id, locale)
        return is_path_excluded(path, paths)

    async def delete_document_exclusions(self, collection: str, document_id: str) -> int:
        """Remove the records of every locale of a document; returns how many."""
        records = await self.storage.query(
            self.slug,
            filters={"collection": collection, "document_id": document_id},
            limit=10_000,
        )
        deleted = 0
        for record in records:
            if await self.storage.delete(self.slug, record.get("id") or record["_id"]):
                deleted += 1

        if deleted and self.debugging:
            logger.info(
                f"[Auto-Translate] Removed {deleted} exclusion record(s) for {collection}:{document_id}"
            )
        return deleted
