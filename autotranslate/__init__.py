"""
Auto-translate - keeps the secondary locales of structured documents in
sync with the default locale through an LLM translation provider.
"""

from autotranslate.errors import (
    AutoTranslateError,
    ConfigurationError,
    ProviderError,
    ResponseParseError,
    SettingsLockedError,
    TranslationTimeoutError,
)
from autotranslate.plugin import AutoTranslate
from autotranslate.plugin_config import (
    AutoTranslateConfig,
    CollectionTranslateConfig,
    LocalizationConfig,
    ProviderConfig,
)

__version__ = "0.1.0"

__all__ = [
    "AutoTranslate",
    "AutoTranslateConfig",
    "CollectionTranslateConfig",
    "LocalizationConfig",
    "ProviderConfig",
    "AutoTranslateError",
    "ConfigurationError",
    "ProviderError",
    "ResponseParseError",
    "SettingsLockedError",
    "TranslationTimeoutError",
]
