"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from autotranslate.api.app import create_app
from autotranslate.plugin import AutoTranslate
from autotranslate.storage import InMemoryDocumentStorage, StorageProvider


@pytest.fixture
def client(plugin):
    with TestClient(create_app(plugin)) as client:
        yield client


def toggle(client, field_path, exclude=True, locale="en"):
    return client.post("/api/translation-exclusions/toggle", json={
        "collection": "posts",
        "documentId": "p1",
        "locale": locale,
        "fieldPath": field_path,
        "exclude": exclude,
    })


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy", "service": "autotranslate-api"}


class TestExclusionsApi:
    def test_missing_parameters(self, client):
        response = client.get("/api/translation-exclusions", params={"collection": "posts"})

        assert response.status_code == 400
        assert "documentId" in response.json()["detail"]

    def test_toggle_and_read(self, client):
        response = toggle(client, "seo.title")

        assert response.status_code == 200
        assert response.json() == {"success": True, "isExcluded": True, "excludedPaths": ["seo.title"]}

        response = client.get("/api/translation-exclusions", params={
            "collection": "posts", "documentId": "p1", "locale": "en", "fieldPath": "seo.title",
        })
        assert response.json() == {"isExcluded": True, "excludedPaths": ["seo.title"]}

        response = toggle(client, "seo.title", exclude=False)
        assert response.json() == {"success": True, "isExcluded": False, "excludedPaths": []}

    def test_toggle_missing_field_path(self, client):
        response = client.post("/api/translation-exclusions/toggle", json={
            "collection": "posts", "documentId": "p1", "locale": "en", "exclude": True,
        })
        assert response.status_code == 400

    def test_toggle_storage_failure(self, config, provider, env_settings, failing_metadata):
        storage = StorageProvider(documents=InMemoryDocumentStorage(), metadata=failing_metadata)
        plugin = AutoTranslate(config, storage=storage, provider=provider, settings=env_settings)

        with TestClient(create_app(plugin)) as client:
            assert toggle(client, "title").status_code == 500

    def test_fields(self, client):
        assert client.get("/api/translation-exclusions/fields", params={
            "collection": "posts", "documentId": "p1", "locale": "en",
        }).status_code == 404

        client.put("/api/posts/p1", params={"locale": "en"}, json={"title": "Hello", "seo": {"title": "SEO"}})
        toggle(client, "seo")

        response = client.get("/api/translation-exclusions/fields", params={
            "collection": "posts", "documentId": "p1", "locale": "en",
        })

        assert response.status_code == 200
        assert response.json()["fields"] == [
            {"path": "title", "isExcluded": False},
            {"path": "seo", "isExcluded": True},
            {"path": "seo.title", "isExcluded": True},
        ]


class TestSettingsApi:
    def test_locked_by_default(self, client):
        settings = client.get("/api/translation-settings").json()
        assert settings["locked"] is True

        response = client.patch("/api/translation-settings", json={"temperature": 0.1})
        assert response.status_code == 423

    def test_unlock_update_relocks(self, client):
        assert client.post("/api/translation-settings/unlock").json()["locked"] is False

        response = client.patch("/api/translation-settings", json={"temperature": 0.1, "maxTokens": 1000})

        assert response.status_code == 200
        body = response.json()
        assert body["temperature"] == 0.1
        assert body["max_tokens"] == 1000
        assert body["locked"] is True

    def test_out_of_range(self, client):
        client.post("/api/translation-settings/unlock")
        response = client.patch("/api/translation-settings", json={"temperature": 5})
        assert response.status_code == 422

    def test_lock(self, client):
        client.post("/api/translation-settings/unlock")
        assert client.post("/api/translation-settings/lock").json()["locked"] is True


class TestContentApi:
    def test_put_translates(self, client):
        response = client.put("/api/posts/p1", params={"locale": "sv"}, json={
            "title": "Välkommen till bloggen",
            "_status": "published",
            "translationSync": True,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["document"]["id"] == "p1"
        assert body["sync"]["skipped"] is None
        assert [o["locale"] for o in body["sync"]["outcomes"]] == ["en", "de"]

        english = client.get("/api/posts/p1", params={"locale": "en"}).json()
        assert english["title"] == "[en] Välkommen till bloggen"

    def test_put_draft_reports_skip(self, client):
        response = client.put("/api/posts/p1", json={"title": "Utkast till artikel", "_status": "draft"})

        assert response.json()["sync"]["skipped"] == "draft"
        assert client.get("/api/posts/p1", params={"locale": "en"}).status_code == 404

    def test_put_unknown_locale(self, client):
        response = client.put("/api/posts/p1", params={"locale": "fr"}, json={"title": "Bonjour"})
        assert response.status_code == 400

    def test_get_missing(self, client):
        assert client.get("/api/posts/nope").status_code == 404

    def test_delete(self, client, plugin):
        client.put("/api/posts/p1", json={"title": "Välkommen", "translationSync": True})
        toggle(client, "title")

        assert client.delete("/api/posts/p1").json() == {"deleted": True}
        assert client.get("/api/posts/p1").status_code == 404
        assert client.delete("/api/posts/p1").status_code == 404

        response = client.get("/api/translation-exclusions", params={
            "collection": "posts", "documentId": "p1", "locale": "en",
        })
        assert response.json()["excludedPaths"] == []
