"""
Sync orchestrator.

Handles document write events. A write to the default locale that passes
every gate is translated into each secondary locale in turn; the
translated documents are persisted and returned as sync-generated write
events, which the same gates then skip.

Gates, in order:
    1. the collection has translation enabled
    2. the operation is a create or an update
    3. the write's locale is the default locale
    4. a document with a ``_status`` field is published
    5. the document's ``translationSync`` flag is on
    6. the write is not sync-generated
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from autotranslate.core.events import (
    DOCUMENT_DELETED,
    Event,
    WriteOperation,
    WriteOrigin,
    document_written,
)
from autotranslate.core.exclusions import merge_preserved
from autotranslate.core.reconstruction import unresolved_placeholders
from autotranslate.errors import ConfigurationError
from autotranslate.plugin_config import AutoTranslateConfig
from autotranslate.services.base import Service
from autotranslate.services.exclusions import ExclusionStore
from autotranslate.storage.base import DocumentStorage
from autotranslate.translation.pipeline import DocumentTranslator
from autotranslate.translation.settings import SettingsRepository, TranslationSettings

logger = logging.getLogger(__name__)

SYNC_FLAG_FIELD = "translationSync"
STATUS_FIELD = "_status"
PUBLISHED = "published"


class SkipReason(str, Enum):
    """Why a write was not translated."""

    COLLECTION_DISABLED = "collection_disabled"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    NOT_DEFAULT_LOCALE = "not_default_locale"
    DRAFT = "draft"
    SYNC_DISABLED = "sync_disabled"
    SYNC_GENERATED = "sync_generated"


@dataclass
class LocaleOutcome:
    """Result of translating one document into one locale."""

    locale: str
    status: str  # translated, failed
    error: str | None = None
    unresolved: int = 0


@dataclass
class SyncReport:
    """What happened to one write event."""

    event_id: str
    collection: str
    document_id: str
    skipped: SkipReason | None = None
    outcomes: list[LocaleOutcome] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def triggered(self) -> bool:
        return self.skipped is None

    @property
    def translated_locales(self) -> list[str]:
        return [o.locale for o in self.outcomes if o.status == "translated"]

    @property
    def failed_locales(self) -> list[str]:
        return [o.locale for o in self.outcomes if o.status == "failed"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "collection": self.collection,
            "document_id": self.document_id,
            "skipped": self.skipped.value if self.skipped else None,
            "outcomes": [
                {"locale": o.locale, "status": o.status, "error": o.error, "unresolved": o.unresolved}
                for o in self.outcomes
            ],
            "timestamp": self.timestamp.isoformat(),
        }


class SyncOrchestrator(Service):
    """
    Translates default-locale writes into every secondary locale.

    Locales are processed one at a time. A failing locale is logged and
    reported; the remaining locales are still translated. Configuration
    errors (e.g. no API key) stop the fan-out.
    """

    def __init__(
        self,
        config: AutoTranslateConfig,
        documents: DocumentStorage,
        translator: DocumentTranslator,
        exclusions: ExclusionStore,
        settings_repo: SettingsRepository,
        max_reports: int = 100,
    ):
        self.config = config
        self.localization = config.require_localization()
        self.documents = documents
        self.translator = translator
        self.exclusions = exclusions
        self.settings_repo = settings_repo
        self.debugging = config.debugging

        self._reports: list[SyncReport] = []
        self._max_reports = max_reports

    @property
    def service_id(self) -> str:
        return "translation_sync"

    @property
    def subscribes_to(self) -> list[str]:
        return ["document.*"]

    # =========================================================================
    # Event handling
    # =========================================================================

    async def handle(self, event: Event) -> list[Event]:
        if event.event_type == DOCUMENT_DELETED:
            if self.config.enable_exclusions:
                await self.exclusions.delete_document_exclusions(event.collection, event.document_id)
            return []

        _, follow_ups = await self.sync(event)
        return follow_ups

    def check_gates(self, event: Event) -> SkipReason | None:
        """First gate the write fails, or None when it should be translated."""
        data = event.data or {}

        if not self.config.is_collection_enabled(event.collection):
            return SkipReason.COLLECTION_DISABLED

        if event.operation not in (WriteOperation.CREATE, WriteOperation.UPDATE):
            return SkipReason.UNSUPPORTED_OPERATION

        if event.locale != self.localization.default_locale:
            if self.debugging:
                logger.info(
                    f"[Auto-Translate] Skipping translation - not default locale "
                    f"(current: {event.locale}, default: {self.localization.default_locale})"
                )
            return SkipReason.NOT_DEFAULT_LOCALE

        if STATUS_FIELD in data and data[STATUS_FIELD] != PUBLISHED:
            if self.debugging:
                logger.info(
                    f"[Auto-Translate] Skipping translation - document is a draft "
                    f"(status: {data[STATUS_FIELD]})"
                )
            return SkipReason.DRAFT

        sync_enabled = data.get(SYNC_FLAG_FIELD)
        if sync_enabled is None:
            sync_enabled = self.config.enable_translation_sync_by_default
        if not sync_enabled:
            if self.debugging:
                logger.info(f"[Auto-Translate] Skipping translation - sync disabled for {event.document_id}")
            return SkipReason.SYNC_DISABLED

        if event.origin == WriteOrigin.SYNC_GENERATED:
            return SkipReason.SYNC_GENERATED

        return None

    async def sync(self, event: Event) -> tuple[SyncReport, list[Event]]:
        """
        Run the gates and, if they pass, the per-locale fan-out.

        Returns:
            The report and the sync-generated write events
        """
        report = SyncReport(event_id=event.id, collection=event.collection, document_id=event.document_id)
        report.skipped = self.check_gates(event)
        if report.skipped is not None:
            self._record(report)
            return report, []

        if self.debugging:
            logger.info(
                f"[Auto-Translate] Processing {event.collection} document "
                f"{event.operation.value}: {event.document_id}"
            )

        # One settings snapshot per batch
        settings = await self.settings_repo.load()

        follow_ups: list[Event] = []
        try:
            for locale in self.localization.secondary_locales:
                try:
                    follow_up, unresolved = await self.translate_locale(event, locale, settings)
                except ConfigurationError as e:
                    logger.error(f"[Auto-Translate] Configuration error, translation aborted: {e}")
                    report.outcomes.append(LocaleOutcome(locale=locale, status="failed", error=str(e)))
                    raise
                except Exception as e:
                    logger.exception(
                        f"[Auto-Translate] Failed to translate {event.collection}:{event.document_id} "
                        f"to {locale}"
                    )
                    report.outcomes.append(LocaleOutcome(locale=locale, status="failed", error=str(e)))
                    continue

                follow_ups.append(follow_up)
                report.outcomes.append(LocaleOutcome(locale=locale, status="translated", unresolved=unresolved))
        finally:
            self._record(report)

        return report, follow_ups

    async def translate_locale(
        self,
        event: Event,
        locale: str,
        settings: TranslationSettings,
    ) -> tuple[Event, int]:
        """
        Translate the event's document into one locale and persist it.

        Returns:
            The sync-generated write event and the number of placeholders
            left unresolved
        """
        source_locale = self.localization.default_locale
        excluded = await self.excluded_paths(event.collection, event.document_id, locale)

        if self.debugging:
            logger.info(
                f"[Auto-Translate] Translating {event.collection}:{event.document_id} "
                f"from {source_locale} to {locale}"
            )
            if excluded:
                logger.info(f"[Auto-Translate] Excluded paths for {locale}: {excluded}")

        translated = await self.translator.translate(
            event.data,
            source_locale,
            locale,
            settings,
            excluded_paths=excluded,
            collection=event.collection,
            document_id=event.document_id,
        )

        # A missing target document just means there is nothing to preserve
        existing = await self.documents.get(event.collection, event.document_id, locale)
        merged = merge_preserved(translated, existing, excluded)

        unresolved = unresolved_placeholders(merged)
        if unresolved:
            logger.warning(
                f"[Auto-Translate] {len(unresolved)} untranslated placeholder(s) in "
                f"{event.collection}:{event.document_id} ({locale}): {unresolved[:5]}"
            )

        stored = await self.documents.save(event.collection, event.document_id, locale, merged)

        if self.debugging:
            logger.info(
                f"[Auto-Translate] Successfully translated {event.collection}:{event.document_id} to {locale}"
            )

        follow_up = document_written(
            event.collection,
            event.document_id,
            stored,
            locale,
            created=existing is None,
            origin=WriteOrigin.SYNC_GENERATED,
        ).caused_by(event)
        return follow_up, len(unresolved)

    async def excluded_paths(self, collection: str, document_id: str, locale: str) -> list[str]:
        """Configured field names followed by the document's exclusions for ``locale``."""
        paths = self.config.excluded_fields_for(collection)
        if self.config.enable_exclusions:
            paths = [*paths, *await self.exclusions.get_exclusions(collection, document_id, locale)]
        return paths

    # =========================================================================
    # Reports
    # =========================================================================

    def _record(self, report: SyncReport) -> None:
        self._reports.append(report)
        if len(self._reports) > self._max_reports:
            self._reports = self._reports[-self._max_reports:]

    def report_for(self, event_id: str) -> SyncReport | None:
        for report in reversed(self._reports):
            if report.event_id == event_id:
                return report
        return None
