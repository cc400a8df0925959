"""
Auto-translate - Main entry point.

Runs a small demonstration with an offline provider that "translates" by
tagging every string with the target locale, so it needs no API key.
"""

from __future__ import annotations

import asyncio
import logging

from autotranslate.plugin import AutoTranslate
from autotranslate.plugin_config import (
    AutoTranslateConfig,
    CollectionTranslateConfig,
    LocalizationConfig,
    ProviderConfig,
)
from autotranslate.translation.providers import TranslationRequest


def tag_with_locale(request: TranslationRequest) -> dict[str, str]:
    return {path: f"[{request.to_locale}] {text}" for path, text in request.payload.items()}


async def demo():
    """
    Write a published post in Swedish and show its English and German
    versions, with one field pinned in English.
    """
    print("=" * 60)
    print("AUTO-TRANSLATE DEMO")
    print("=" * 60)
    print()

    config = AutoTranslateConfig(
        localization=LocalizationConfig(default_locale="sv", locales=["sv", "en", "de"]),
        collections={"posts": CollectionTranslateConfig(exclude_fields=["slug"])},
        enable_translation_sync_by_default=True,
        debugging=True,
        provider=ProviderConfig(type="custom", custom_translate=tag_with_locale),
    )
    plugin = AutoTranslate(config)
    plugin.install()

    print("Pinning seo.title in English...")
    await plugin.exclusions.toggle("posts", "post-1", "en", "seo.title", exclude=True)
    await plugin.content.write(
        "posts", "post-1", {"seo": {"title": "Handwritten English title"}}, locale="en",
    )
    print()

    print("Writing the Swedish original...")
    result = await plugin.content.write(
        "posts",
        "post-1",
        {
            "title": "Välkommen till vår blogg",
            "slug": "valkommen",
            "_status": "published",
            "seo": {"title": "Välkommen", "description": "Vår första artikel"},
            "tags": ["Nyheter", "Nyheter", "Sverige"],
        },
        locale="sv",
    )
    report = plugin.orchestrator.report_for(result.event.id)
    print(f"  ✓ Translated to: {', '.join(report.translated_locales)}")
    print()

    for locale in plugin.localization.secondary_locales:
        document = await plugin.content.read("posts", "post-1", locale)
        print(f"{locale}:")
        for key in ("title", "slug", "seo", "tags"):
            print(f"  • {key}: {document.get(key)}")
        print()

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


def main():
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(demo())


if __name__ == "__main__":
    main()
