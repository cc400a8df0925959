"""
Translation - settings, providers, the invoker and the document pipeline.

Usage:
    from autotranslate.translation import (
        DocumentTranslator, TranslationInvoker, OpenAIProvider,
    )

    invoker = TranslationInvoker(OpenAIProvider(api_key="..."))
    translator = DocumentTranslator(invoker)

    translated = await translator.translate(
        {"title": "Hej världen"}, "sv", "en", settings,
        excluded_paths=["seo.metaTitle"],
    )
"""

from autotranslate.translation.settings import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TRANSLATION_RULES,
    SettingsRepository,
    TranslationSettings,
)
from autotranslate.translation.providers import (
    CustomProvider,
    DSPyProvider,
    OpenAIProvider,
    TranslationProvider,
    TranslationRequest,
    create_provider,
)
from autotranslate.translation.invoker import TranslationInvoker
from autotranslate.translation.pipeline import DocumentTranslator

__all__ = [
    # Settings
    "DEFAULT_SYSTEM_PROMPT",
    "DEFAULT_TRANSLATION_RULES",
    "SettingsRepository",
    "TranslationSettings",
    # Providers
    "CustomProvider",
    "DSPyProvider",
    "OpenAIProvider",
    "TranslationProvider",
    "TranslationRequest",
    "create_provider",
    # Invocation
    "TranslationInvoker",
    "DocumentTranslator",
]
