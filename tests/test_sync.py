"""
Tests for the sync orchestrator: gates, fan-out, exclusions and isolation.
"""

import pytest

from autotranslate.core.events import (
    DOCUMENT_CREATED,
    DOCUMENT_UPDATED,
    WriteOrigin,
    document_deleted,
    document_written,
)
from autotranslate.errors import ConfigurationError
from autotranslate.plugin import AutoTranslate
from autotranslate.services.sync import SkipReason


def post(**fields):
    return {
        "title": "Välkommen till bloggen",
        "body": "Det här är vår första artikel",
        "slug": "valkommen",
        "_status": "published",
        "translationSync": True,
        **fields,
    }


# =============================================================================
# Gates
# =============================================================================


class TestGates:
    def test_gate_order(self, plugin):
        gates = plugin.orchestrator.check_gates

        media = document_written("media", "m1", post(), "sv", created=True)
        deleted = document_deleted("posts", "p1")
        english_draft = document_written("posts", "p1", post(_status="draft"), "en", created=True)
        draft_disabled = document_written(
            "posts", "p1", post(_status="draft", translationSync=False), "sv", created=True,
        )
        disabled_sync_generated = document_written(
            "posts", "p1", post(translationSync=False), "sv", created=True, origin=WriteOrigin.SYNC_GENERATED,
        )

        assert gates(media) == SkipReason.COLLECTION_DISABLED
        assert gates(deleted) == SkipReason.UNSUPPORTED_OPERATION
        assert gates(english_draft) == SkipReason.NOT_DEFAULT_LOCALE
        assert gates(draft_disabled) == SkipReason.DRAFT
        assert gates(disabled_sync_generated) == SkipReason.SYNC_DISABLED

    def test_sync_generated_never_translates(self, plugin):
        event = document_written("posts", "p1", post(), "sv", created=False, origin=WriteOrigin.SYNC_GENERATED)
        assert plugin.orchestrator.check_gates(event) == SkipReason.SYNC_GENERATED

    def test_passes(self, plugin):
        event = document_written("posts", "p1", post(), "sv", created=True)
        assert plugin.orchestrator.check_gates(event) is None

    def test_documents_without_status_field(self, plugin):
        data = post()
        del data["_status"]
        event = document_written("posts", "p1", data, "sv", created=False)

        assert plugin.orchestrator.check_gates(event) is None

    def test_sync_flag_default(self, plugin, config):
        data = post()
        del data["translationSync"]
        event = document_written("posts", "p1", data, "sv", created=True)

        assert plugin.orchestrator.check_gates(event) is None

        config.enable_translation_sync_by_default = False
        assert plugin.orchestrator.check_gates(event) == SkipReason.SYNC_DISABLED


# =============================================================================
# Fan-out
# =============================================================================


class TestSync:
    @pytest.mark.asyncio
    async def test_published_write_translates_every_secondary_locale(self, plugin, provider):
        result = await plugin.content.write("posts", "p1", post(), locale="sv")

        report = plugin.orchestrator.report_for(result.event.id)
        assert report.triggered
        assert report.translated_locales == ["en", "de"]
        assert report.failed_locales == []

        english = await plugin.content.read("posts", "p1", "en")
        german = await plugin.content.read("posts", "p1", "de")
        assert english["title"] == "[en] Välkommen till bloggen"
        assert english["body"] == "[en] Det här är vår första artikel"
        assert english["_status"] == "published"
        assert german["title"] == "[de] Välkommen till bloggen"

        # Source untouched
        swedish = await plugin.content.read("posts", "p1", "sv")
        assert swedish["title"] == "Välkommen till bloggen"

        # One provider call per locale, no re-translation of the writes it made
        assert [r.to_locale for r in provider.requests] == ["en", "de"]
        assert [e.origin for e in result.follow_ups] == [WriteOrigin.SYNC_GENERATED] * 2
        assert all(e.causation_id == result.event.id for e in result.follow_ups)
        assert [e.event_type for e in result.follow_ups] == [DOCUMENT_CREATED, DOCUMENT_CREATED]

        follow_up_reports = [plugin.orchestrator.report_for(e.id) for e in result.follow_ups]
        assert [r.skipped for r in follow_up_reports] == [SkipReason.NOT_DEFAULT_LOCALE] * 2

    @pytest.mark.asyncio
    async def test_draft_not_translated(self, plugin, provider):
        result = await plugin.content.write("posts", "p1", post(_status="draft"), locale="sv")

        assert plugin.orchestrator.report_for(result.event.id).skipped == SkipReason.DRAFT
        assert await plugin.content.read("posts", "p1", "en") is None
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_sync_generated_write_not_translated(self, plugin, provider):
        result = await plugin.content.write(
            "posts", "p1", post(), locale="sv", origin=WriteOrigin.SYNC_GENERATED,
        )

        assert plugin.orchestrator.report_for(result.event.id).skipped == SkipReason.SYNC_GENERATED
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_disabled_collection_not_handled(self, plugin, provider):
        result = await plugin.content.write("media", "m1", post(), locale="sv")

        assert plugin.orchestrator.report_for(result.event.id) is None
        assert result.follow_ups == []
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_second_write_updates_translations(self, plugin):
        await plugin.content.write("posts", "p1", post(), locale="sv")
        first = await plugin.content.read("posts", "p1", "en")

        result = await plugin.content.write("posts", "p1", post(title="Ny rubrik"), locale="sv")
        second = await plugin.content.read("posts", "p1", "en")

        assert second["title"] == "[en] Ny rubrik"
        assert second["createdAt"] == first["createdAt"]
        assert [e.event_type for e in result.follow_ups] == [DOCUMENT_UPDATED, DOCUMENT_UPDATED]

    @pytest.mark.asyncio
    async def test_configured_fields_excluded(self, plugin, provider):
        await plugin.content.write("posts", "p1", post(), locale="sv")

        english = await plugin.content.read("posts", "p1", "en")
        assert "slug" not in english
        assert all("slug" not in r.payload for r in provider.requests)

    @pytest.mark.asyncio
    async def test_settings_loaded_once_per_batch(self, plugin, provider, monkeypatch):
        calls = []
        load = plugin.settings_repo.load

        async def counting_load():
            calls.append(1)
            return await load()

        monkeypatch.setattr(plugin.settings_repo, "load", counting_load)
        await plugin.content.write("posts", "p1", post(), locale="sv")

        assert len(calls) == 1
        assert "from sv to en" in provider.requests_for("en")[0].system_message
        assert "from sv to de" in provider.requests_for("de")[0].system_message


# =============================================================================
# Exclusions
# =============================================================================


class TestSyncExclusions:
    @pytest.mark.asyncio
    async def test_excluded_field_preserved(self, plugin, provider):
        await plugin.content.write("posts", "p1", {"title": "Handwritten title"}, locale="en")
        await plugin.exclusions.toggle("posts", "p1", "en", "title", exclude=True)

        await plugin.content.write("posts", "p1", post(), locale="sv")

        english = await plugin.content.read("posts", "p1", "en")
        german = await plugin.content.read("posts", "p1", "de")
        assert english["title"] == "Handwritten title"
        assert english["body"] == "[en] Det här är vår första artikel"
        assert german["title"] == "[de] Välkommen till bloggen"

        english_request = provider.requests_for("en")[0]
        assert "title" not in english_request.payload
        assert "Välkommen till bloggen" not in english_request.user_content

    @pytest.mark.asyncio
    async def test_excluded_field_without_existing_document(self, plugin):
        await plugin.exclusions.toggle("posts", "p1", "en", "title", exclude=True)

        await plugin.content.write("posts", "p1", post(), locale="sv")

        english = await plugin.content.read("posts", "p1", "en")
        assert "title" not in english
        assert english["body"] == "[en] Det här är vår första artikel"

    @pytest.mark.asyncio
    async def test_excluded_list_elements_not_persisted_as_null(self, plugin):
        tags = ["Första etiketten", "Andra etiketten"]
        await plugin.content.write("posts", "p1", {"tags": ["Own tag"]}, locale="en")
        await plugin.exclusions.toggle("posts", "p1", "en", "tags[0]", exclude=True)
        await plugin.exclusions.toggle("posts", "p1", "de", "tags[0]", exclude=True)

        await plugin.content.write("posts", "p1", post(tags=tags), locale="sv")

        english = await plugin.content.read("posts", "p1", "en")
        german = await plugin.content.read("posts", "p1", "de")
        assert english["tags"] == ["Own tag"]
        assert german["tags"] == []

    @pytest.mark.asyncio
    async def test_exclusions_disabled(self, config, provider, env_settings):
        config.enable_exclusions = False
        plugin = AutoTranslate(config, provider=provider, settings=env_settings)
        plugin.install()

        await plugin.content.write("posts", "p1", {"title": "Handwritten title"}, locale="en")
        await plugin.exclusions.toggle("posts", "p1", "en", "title", exclude=True)
        await plugin.content.write("posts", "p1", post(), locale="sv")

        english = await plugin.content.read("posts", "p1", "en")
        assert english["title"] == "[en] Välkommen till bloggen"

    @pytest.mark.asyncio
    async def test_delete_removes_exclusions(self, plugin):
        await plugin.content.write("posts", "p1", post(), locale="sv")
        await plugin.exclusions.toggle("posts", "p1", "en", "title", exclude=True)
        await plugin.exclusions.toggle("posts", "p1", "de", "body", exclude=True)

        assert await plugin.content.delete("posts", "p1")

        assert await plugin.exclusions.get_exclusions("posts", "p1", "en") == []
        assert await plugin.exclusions.get_exclusions("posts", "p1", "de") == []
        assert await plugin.content.read("posts", "p1", "en") is None


# =============================================================================
# Failures
# =============================================================================


class TestSyncFailures:
    @pytest.mark.asyncio
    async def test_failed_locale_does_not_stop_others(self, config, make_provider, env_settings):
        provider = make_provider(fail_locales=["en"])
        plugin = AutoTranslate(config, provider=provider, settings=env_settings)
        plugin.install()

        await plugin.content.write("posts", "p1", {"title": "Old English title"}, locale="en")
        result = await plugin.content.write("posts", "p1", post(), locale="sv")

        report = plugin.orchestrator.report_for(result.event.id)
        assert report.failed_locales == ["en"]
        assert report.translated_locales == ["de"]
        assert "provider down for en" in report.outcomes[0].error

        english = await plugin.content.read("posts", "p1", "en")
        german = await plugin.content.read("posts", "p1", "de")
        assert english["title"] == "Old English title"
        assert "body" not in english
        assert german["title"] == "[de] Välkommen till bloggen"
        assert [e.locale for e in result.follow_ups] == ["de"]

    @pytest.mark.asyncio
    async def test_configuration_error_aborts_fan_out(self, config, make_provider, env_settings):
        provider = make_provider(fail_locales=["en", "de"], error=ConfigurationError("API key not set"))
        plugin = AutoTranslate(config, provider=provider, settings=env_settings)
        plugin.install()

        result = await plugin.content.write("posts", "p1", post(), locale="sv")

        report = plugin.orchestrator.report_for(result.event.id)
        assert report.failed_locales == ["en"]
        assert [r.to_locale for r in provider.requests] == ["en"]
        assert await plugin.content.read("posts", "p1", "de") is None

    @pytest.mark.asyncio
    async def test_unresolved_placeholders_reported(self, config, make_provider, env_settings):
        provider = make_provider(drop_paths=["body"])
        plugin = AutoTranslate(config, provider=provider, settings=env_settings)
        plugin.install()

        result = await plugin.content.write("posts", "p1", post(), locale="sv")

        report = plugin.orchestrator.report_for(result.event.id)
        assert [o.unresolved for o in report.outcomes] == [1, 1]

        english = await plugin.content.read("posts", "p1", "en")
        assert english["body"] == "__TRANSLATE_body__"
        assert english["title"] == "[en] Välkommen till bloggen"


# =============================================================================
# Installation
# =============================================================================


class TestInstall:
    @pytest.mark.asyncio
    async def test_disabled_plugin_not_installed(self, config, provider, env_settings):
        config.disabled = True
        plugin = AutoTranslate(config, provider=provider, settings=env_settings)
        plugin.install()

        assert not plugin.installed
        await plugin.content.write("posts", "p1", post(), locale="sv")
        assert provider.requests == []

    @pytest.mark.asyncio
    async def test_uninstall(self, plugin, provider):
        plugin.install()  # no double subscription
        plugin.uninstall()

        await plugin.content.write("posts", "p1", post(), locale="sv")
        assert provider.requests == []
