"""
Plugin configuration dataclasses.

These represent the parsed plugin options, usually loaded from YAML.
Keys are snake_case; the camelCase spellings used by the host framework's
plugin options (``defaultLocale``, ``excludeFields``...) are accepted too.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from autotranslate.core.skip_policy import DEFAULT_MIN_STRING_LENGTH
from autotranslate.errors import ConfigurationError

DEFAULT_TIMEOUT = 30.0


def _pick(data: dict[str, Any], key: str, alias: str | None = None, default: Any = None) -> Any:
    if key in data:
        return data[key]
    if alias and alias in data:
        return data[alias]
    return default


# =============================================================================
# Localization
# =============================================================================


@dataclass
class LocalizationConfig:
    """Locales known to the content store."""

    default_locale: str
    locales: list[str] = field(default_factory=list)

    def __post_init__(self):
        if self.default_locale not in self.locales:
            self.locales = [self.default_locale, *self.locales]

    @property
    def secondary_locales(self) -> list[str]:
        return [code for code in self.locales if code != self.default_locale]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocalizationConfig:
        default_locale = _pick(data, "default_locale", "defaultLocale")
        if not default_locale:
            raise ConfigurationError("Localization config requires a default locale")

        locales = []
        for entry in data.get("locales", []):
            # Either "en" or {"code": "en", "label": "English"}
            locales.append(entry["code"] if isinstance(entry, dict) else str(entry))
        return cls(default_locale=default_locale, locales=locales)


# =============================================================================
# Collections
# =============================================================================


@dataclass
class CollectionTranslateConfig:
    """Per-collection translation options."""

    enabled: bool = True
    exclude_fields: list[str] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: bool | dict[str, Any]) -> CollectionTranslateConfig:
        if isinstance(value, bool):
            return cls(enabled=value)
        return cls(
            enabled=value.get("enabled", True),
            exclude_fields=list(_pick(value, "exclude_fields", "excludeFields", [])),
        )


# =============================================================================
# Provider
# =============================================================================


@dataclass
class ProviderConfig:
    """Translation provider selection and overrides."""

    type: str = "openai"  # openai, dspy, custom
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    timeout: float | None = None  # seconds; None = TRANSLATION_TIMEOUT setting

    # dspy only: gemini, anthropic or openai
    llm_provider: str | None = None

    # custom only; set in code, never from YAML
    custom_translate: Callable[..., dict[str, str] | Awaitable[dict[str, str]]] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderConfig:
        return cls(
            type=data.get("type", "openai"),
            api_key=_pick(data, "api_key", "apiKey"),
            base_url=_pick(data, "base_url", "baseURL"),
            model=data.get("model"),
            timeout=float(data["timeout"]) if data.get("timeout") else None,
            llm_provider=_pick(data, "llm_provider", "llmProvider"),
        )


# =============================================================================
# Plugin
# =============================================================================


@dataclass
class AutoTranslateConfig:
    """Complete plugin configuration."""

    localization: LocalizationConfig | None = None
    collections: dict[str, CollectionTranslateConfig] = field(default_factory=dict)

    # Field names excluded for every collection
    exclude_fields: list[str] = field(default_factory=list)

    min_string_length: int = DEFAULT_MIN_STRING_LENGTH
    enable_deduplication: bool = True
    optimize_translation: bool = True
    enable_exclusions: bool = True
    auto_inject_ui: bool = True
    enable_translation_sync_by_default: bool = False

    debugging: bool = False
    disabled: bool = False

    translation_exclusions_slug: str = "translation-exclusions"
    translation_settings_slug: str = "translation-settings"

    provider: ProviderConfig = field(default_factory=ProviderConfig)

    def is_collection_enabled(self, collection: str) -> bool:
        config = self.collections.get(collection)
        return config is not None and config.enabled

    def excluded_fields_for(self, collection: str) -> list[str]:
        """Global excluded fields followed by the collection's own."""
        config = self.collections.get(collection)
        if config is None:
            return list(self.exclude_fields)
        return [*self.exclude_fields, *config.exclude_fields]

    def require_localization(self) -> LocalizationConfig:
        if self.localization is None:
            raise ConfigurationError("Auto-translate requires localization to be configured")
        return self.localization

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutoTranslateConfig:
        localization = data.get("localization")
        collections = data.get("collections") or {}

        return cls(
            localization=LocalizationConfig.from_dict(localization) if localization else None,
            collections={
                slug: CollectionTranslateConfig.from_value(value)
                for slug, value in collections.items()
            },
            exclude_fields=list(_pick(data, "exclude_fields", "excludeFields", [])),
            min_string_length=int(_pick(data, "min_string_length", "minStringLength", DEFAULT_MIN_STRING_LENGTH)),
            enable_deduplication=_pick(data, "enable_deduplication", "enableDeduplication", True),
            optimize_translation=_pick(data, "optimize_translation", "optimizeTranslation", True),
            enable_exclusions=_pick(data, "enable_exclusions", "enableExclusions", True),
            auto_inject_ui=_pick(data, "auto_inject_ui", "autoInjectUI", True),
            enable_translation_sync_by_default=_pick(
                data, "enable_translation_sync_by_default", "enableTranslationSyncByDefault", False
            ),
            debugging=data.get("debugging", False),
            disabled=data.get("disabled", False),
            translation_exclusions_slug=_pick(
                data, "translation_exclusions_slug", "translationExclusionsSlug", "translation-exclusions"
            ),
            translation_settings_slug=_pick(
                data, "translation_settings_slug", "translationSettingsSlug", "translation-settings"
            ),
            provider=ProviderConfig.from_dict(data.get("provider") or {}),
        )
