"""
Services - content writes, exclusions and translation sync.
"""

from autotranslate.services.base import Service
from autotranslate.services.content import ContentService, WriteResult
from autotranslate.services.exclusions import ExclusionRecord, ExclusionStore
from autotranslate.services.sync import (
    LocaleOutcome,
    SkipReason,
    SyncOrchestrator,
    SyncReport,
)

__all__ = [
    "Service",
    "ContentService",
    "WriteResult",
    "ExclusionRecord",
    "ExclusionStore",
    "LocaleOutcome",
    "SkipReason",
    "SyncOrchestrator",
    "SyncReport",
]
