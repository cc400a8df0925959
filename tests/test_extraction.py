"""
Tests for extraction and reconstruction.

Core property: reconstructing with an identity translation gives back
the original document.
"""

import pytest

from autotranslate.core.extraction import Extractor, extract, make_placeholder, parse_placeholder
from autotranslate.core.reconstruction import expand_translations, reconstruct, unresolved_placeholders


# =============================================================================
# Fixtures
# =============================================================================


def text_node(text, **extra):
    return {"type": "text", "version": 1, "text": text, "format": 0, **extra}


@pytest.fixture
def rich_text():
    """A rich-text editor value with two paragraphs."""
    return {
        "root": {
            "type": "root",
            "version": 1,
            "direction": "ltr",
            "children": [
                {
                    "type": "paragraph",
                    "version": 1,
                    "children": [text_node("Välkommen till bloggen", format=1), text_node("42")],
                },
                {
                    "type": "paragraph",
                    "version": 1,
                    "children": [text_node("En andra paragraf")],
                },
            ],
        }
    }


@pytest.fixture
def document(rich_text):
    return {
        "id": "507f1f77bcf86cd799439011",
        "title": "Välkommen till bloggen",
        "slug": "valkommen",
        "views": 120,
        "featured": True,
        "cover": None,
        "seo": {"title": "Välkommen", "image": "/media/cover.png"},
        "tags": ["Nyheter", "Sverige", "Nyheter"],
        "blocks": [
            {"heading": "Första blocket", "link": "https://example.com"},
            {"heading": "Andra blocket", "items": []},
        ],
        "body": rich_text,
        "createdAt": "2024-01-01T00:00:00.000Z",
    }


# =============================================================================
# Placeholders
# =============================================================================


class TestPlaceholders:
    def test_make_and_parse(self):
        token = make_placeholder("blocks[0].heading")
        assert token == "__TRANSLATE_blocks[0].heading__"
        assert parse_placeholder(token) == "blocks[0].heading"

    def test_parse_rejects_other_strings(self):
        assert parse_placeholder("Hello") is None
        assert parse_placeholder("__TRANSLATE__") is None


# =============================================================================
# Extraction
# =============================================================================


class TestExtraction:
    def test_simple_document(self):
        result = extract({"title": "Hello world", "count": 5, "cover": None})

        assert result.strings == {"title": "Hello world"}
        assert result.metadata == {"title": "__TRANSLATE_title__", "count": 5, "cover": None}
        assert result.deduplication_index == {"Hello world": ["title"]}

    def test_skipped_values_stay_in_metadata(self, document):
        result = extract(document)

        assert result.metadata["id"] == document["id"]
        assert result.metadata["seo"]["image"] == "/media/cover.png"
        assert result.metadata["blocks"][0]["link"] == "https://example.com"
        assert result.metadata["createdAt"] == document["createdAt"]
        assert "id" not in result.strings

    def test_array_paths_use_brackets(self):
        result = extract({"blocks": [{"heading": "First block"}]})
        assert result.strings == {"blocks[0].heading": "First block"}

    def test_path_prefix(self):
        result = extract({"title": "Hello"}, path="doc")
        assert result.strings == {"doc.title": "Hello"}
        assert result.metadata == {"title": "__TRANSLATE_doc.title__"}

    def test_deduplication(self):
        result = extract({"a": {"x": "Hello"}, "b": {"y": "Hello"}})

        assert result.strings == {"a.x": "Hello"}
        assert result.deduplication_index == {"Hello": ["a.x", "b.y"]}
        # Every path still gets its own placeholder
        assert result.metadata == {"a": {"x": "__TRANSLATE_a.x__"}, "b": {"y": "__TRANSLATE_b.y__"}}
        assert result.deduplication_savings == 1

    def test_deduplication_disabled(self):
        result = extract({"a": "Hello", "b": "Hello"}, enable_deduplication=False)

        assert result.strings == {"a": "Hello", "b": "Hello"}
        assert result.deduplication_index == {"Hello": ["a", "b"]}
        assert result.deduplication_savings == 0

    def test_min_string_length(self):
        result = Extractor(min_string_length=6).extract({"a": "Hello", "b": "Hello world"})
        assert result.strings == {"b": "Hello world"}

    def test_rich_text_only_text_leaves(self, rich_text):
        result = extract({"body": rich_text})

        assert result.strings == {
            "body.root.children[0].children[0].text": "Välkommen till bloggen",
            "body.root.children[1].children[0].text": "En andra paragraf",
        }
        first = result.metadata["body"]["root"]["children"][0]["children"][0]
        assert first == {
            "type": "text",
            "version": 1,
            "text": "__TRANSLATE_body.root.children[0].children[0].text__",
            "format": 1,
        }
        # Skipped text leaf kept as-is
        assert result.metadata["body"]["root"]["children"][0]["children"][1]["text"] == "42"
        assert result.metadata["body"]["root"]["direction"] == "ltr"

    def test_custom_rich_text_detector(self):
        node = {"type": "note", "version": 2, "text": "Plain object text"}
        assert Extractor().extract({"note": node}).strings == {}

        result = Extractor(rich_text_detector=lambda n: False).extract({"note": node})
        assert result.strings["note.text"] == "Plain object text"

    def test_stats(self, document):
        stats = extract(document).stats(document)

        assert stats["total_instances"] == stats["unique_strings"] + stats["deduplication_savings"]
        assert stats["deduplication_savings"] == 2  # "Nyheter" and the title repeated in the body
        assert stats["optimized_size"] < stats["original_size"]


# =============================================================================
# Reconstruction
# =============================================================================


class TestReconstruction:
    def test_round_trip(self, document):
        result = extract(document)
        identity = dict(result.strings)

        assert reconstruct(result.metadata, identity, result.deduplication_index) == document

    def test_round_trip_without_deduplication(self, document):
        result = extract(document, enable_deduplication=False)

        assert reconstruct(result.metadata, result.strings, result.deduplication_index) == document

    def test_duplicates_share_translation(self):
        result = extract({"a": {"x": "Hello"}, "b": {"y": "Hello"}})
        translated = reconstruct(result.metadata, {"a.x": "Hej"}, result.deduplication_index)

        assert translated == {"a": {"x": "Hej"}, "b": {"y": "Hej"}}

    @pytest.mark.parametrize(
        "document",
        [
            {"a": "Hello", "b": " Hello"},
            {"a": "Hello world ", "b": {"c": ["Hello world", "\tHello world\n"]}},
        ],
    )
    def test_round_trip_with_whitespace_variants(self, document):
        result = extract(document)

        assert reconstruct(result.metadata, dict(result.strings), result.deduplication_index) == document

    def test_whitespace_variant_sent_separately(self):
        result = extract({"a": "Hello", "b": " Hello", "c": "Hello"})

        assert result.strings == {"a": "Hello", "b": " Hello"}
        assert result.deduplication_index == {"Hello": ["a", "b", "c"]}
        translated = reconstruct(result.metadata, {"a": "Hej", "b": " Hej"}, result.deduplication_index)
        assert translated == {"a": "Hej", "b": " Hej", "c": "Hej"}

    def test_rich_text_translation(self, rich_text):
        result = extract({"body": rich_text})
        translations = {path: text.upper() for path, text in result.strings.items()}
        translated = reconstruct(result.metadata, translations, result.deduplication_index)

        paragraph = translated["body"]["root"]["children"][0]
        assert paragraph["children"][0]["text"] == "VÄLKOMMEN TILL BLOGGEN"
        assert paragraph["children"][0]["format"] == 1
        assert paragraph["children"][1]["text"] == "42"

    def test_missing_translation_leaves_placeholder(self):
        result = extract({"title": "Hello world", "body": "Some body text"})
        translated = reconstruct(result.metadata, {"body": "Brödtext"}, result.deduplication_index)

        assert translated == {"title": "__TRANSLATE_title__", "body": "Brödtext"}
        assert unresolved_placeholders(translated) == ["title"]

    def test_token_only_substituted_at_its_own_path(self):
        metadata = {"note": "__TRANSLATE_title__", "title": "__TRANSLATE_title__"}
        translated = reconstruct(metadata, {"title": "Hello"}, {})

        assert translated == {"note": "__TRANSLATE_title__", "title": "Hello"}

    def test_expand_keeps_own_translation(self):
        index = {"Hello": ["a", "b", "c"]}
        full = expand_translations({"a": "Hej", "c": "Tjena"}, index)

        assert full == {"a": "Hej", "b": "Hej", "c": "Tjena"}

    def test_prefixed_round_trip(self):
        result = extract({"title": "Hello world"}, path="doc")
        assert reconstruct(result.metadata, result.strings, result.deduplication_index, path="doc") == {
            "title": "Hello world"
        }
