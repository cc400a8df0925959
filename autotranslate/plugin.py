"""
Plugin assembly.

Wires storage, the event bus, the exclusion store, the settings repository,
the translation provider and the sync orchestrator from one
``AutoTranslateConfig``.

Usage:
    config = load_plugin_config("config/autotranslate.yaml")
    plugin = AutoTranslate(config)
    plugin.install()

    result = await plugin.content.write("posts", "p1", {...}, locale="sv")
"""

from __future__ import annotations

import logging
from pathlib import Path

from autotranslate.config import Settings, get_settings
from autotranslate.config_loader import load_plugin_config
from autotranslate.core.events import EventBus, Subscription
from autotranslate.core.extraction import Extractor
from autotranslate.plugin_config import AutoTranslateConfig
from autotranslate.services.content import ContentService
from autotranslate.services.exclusions import ExclusionStore
from autotranslate.services.sync import SyncOrchestrator
from autotranslate.storage import StorageProvider, create_local_storage
from autotranslate.translation.invoker import TranslationInvoker
from autotranslate.translation.pipeline import DocumentTranslator
from autotranslate.translation.providers import TranslationProvider, create_provider
from autotranslate.translation.settings import DEFAULT_MODEL, SettingsRepository

logger = logging.getLogger(__name__)


def default_model(config: AutoTranslateConfig, settings: Settings) -> str:
    """Model used when the settings record names none."""
    if config.provider.model:
        return config.provider.model
    if config.provider.type == "openai":
        return settings.openai_model
    if config.provider.type == "dspy":
        return settings.model_for(config.provider.llm_provider or settings.llm_provider)
    return DEFAULT_MODEL


class AutoTranslate:
    """
    The assembled plugin.

    Raises ConfigurationError at construction when localization is missing.
    The provider is built eagerly but opens no connection, so a missing API
    key only fails the translations that need it.
    """

    def __init__(
        self,
        config: AutoTranslateConfig,
        storage: StorageProvider | None = None,
        bus: EventBus | None = None,
        provider: TranslationProvider | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.config = config
        self.localization = config.require_localization()
        self.storage = storage or create_local_storage()
        self.bus = bus or EventBus()

        self.exclusions = ExclusionStore(
            self.storage.metadata,
            slug=config.translation_exclusions_slug,
            debugging=config.debugging,
        )
        self.settings_repo = SettingsRepository(
            self.storage.metadata,
            slug=config.translation_settings_slug,
            default_model=default_model(config, settings),
            debugging=config.debugging,
        )

        self.provider = provider or create_provider(config.provider, settings)
        self.invoker = TranslationInvoker(
            self.provider,
            timeout=config.provider.timeout or settings.translation_timeout,
            debugging=config.debugging,
        )
        self.translator = DocumentTranslator(
            self.invoker,
            extractor=Extractor(
                min_string_length=config.min_string_length,
                enable_deduplication=config.enable_deduplication,
            ),
            optimize=config.optimize_translation,
            debugging=config.debugging,
        )

        self.orchestrator = SyncOrchestrator(
            config,
            self.storage.documents,
            self.translator,
            self.exclusions,
            self.settings_repo,
        )
        self.content = ContentService(self.storage.documents, self.bus)

        self._subscriptions: list[Subscription] = []

    @classmethod
    def from_yaml(cls, path: Path | str | None = None, **kwargs) -> AutoTranslate:
        settings = kwargs.get("settings")
        return cls(load_plugin_config(path, settings=settings), **kwargs)

    @property
    def enabled_collections(self) -> set[str]:
        return {slug for slug, c in self.config.collections.items() if c.enabled}

    @property
    def installed(self) -> bool:
        return bool(self._subscriptions)

    def install(self) -> None:
        """Subscribe the orchestrator for every enabled collection."""
        if self.config.disabled:
            logger.info("[Auto-Translate] Plugin disabled, not installing hooks")
            return
        if self.installed:
            return

        collections = self.enabled_collections
        for pattern in self.orchestrator.subscribes_to:
            self._subscriptions.append(
                self.bus.subscribe(pattern, self.orchestrator.handle, collections=collections)
            )

        if self.config.debugging:
            logger.info(
                f"[Auto-Translate] Installed for {sorted(collections)} "
                f"({self.localization.default_locale} -> {self.localization.secondary_locales}, "
                f"provider: {self.provider.provider_id})"
            )

    def uninstall(self) -> None:
        for subscription in self._subscriptions:
            self.bus.unsubscribe(subscription)
        self._subscriptions = []
