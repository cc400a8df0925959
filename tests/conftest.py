"""
Shared fixtures: an offline translation provider and an assembled plugin.
"""

import pytest

from autotranslate.config import Settings
from autotranslate.plugin import AutoTranslate
from autotranslate.plugin_config import (
    AutoTranslateConfig,
    CollectionTranslateConfig,
    LocalizationConfig,
    ProviderConfig,
)
from autotranslate.storage import InMemoryMetadataStorage
from autotranslate.translation.providers import TranslationProvider, TranslationRequest


class FakeProvider(TranslationProvider):
    """Tags every string with the target locale and records each request."""

    def __init__(self, fail_locales=(), error=None, drop_paths=()):
        self.fail_locales = set(fail_locales)
        self.error = error
        self.drop_paths = set(drop_paths)
        self.requests: list[TranslationRequest] = []

    @property
    def provider_id(self) -> str:
        return "fake"

    async def complete(self, request: TranslationRequest):
        self.requests.append(request)
        if request.to_locale in self.fail_locales:
            raise self.error or RuntimeError(f"provider down for {request.to_locale}")
        return {
            path: f"[{request.to_locale}] {text}"
            for path, text in request.payload.items()
            if path not in self.drop_paths
        }

    def requests_for(self, locale: str) -> list[TranslationRequest]:
        return [r for r in self.requests if r.to_locale == locale]


class FailingMetadataStorage(InMemoryMetadataStorage):
    """Metadata storage whose every call fails."""

    async def save(self, collection, id, data):
        raise RuntimeError("metadata storage unavailable")

    async def get(self, collection, id):
        raise RuntimeError("metadata storage unavailable")

    async def query(self, collection, filters=None, limit=100, offset=0):
        raise RuntimeError("metadata storage unavailable")


@pytest.fixture
def env_settings():
    """Environment settings that ignore any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def config():
    """Swedish default locale, English and German secondaries."""
    return AutoTranslateConfig(
        localization=LocalizationConfig(default_locale="sv", locales=["sv", "en", "de"]),
        collections={
            "posts": CollectionTranslateConfig(exclude_fields=["slug"]),
            "media": CollectionTranslateConfig(enabled=False),
        },
        enable_translation_sync_by_default=True,
        provider=ProviderConfig(type="custom"),
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def plugin(config, provider, env_settings):
    """Installed plugin with in-memory storage and the fake provider."""
    plugin = AutoTranslate(config, provider=provider, settings=env_settings)
    plugin.install()
    return plugin


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances with custom behaviour."""
    return FakeProvider


@pytest.fixture
def failing_metadata():
    return FailingMetadataStorage()
