"""
Extraction of translatable strings from structured documents.

The extractor walks a document depth-first (object keys in insertion
order, array indices ascending) and replaces every translatable leaf
string with a placeholder token derived from its path. It returns:

- the placeholder skeleton ("metadata"), used later for reconstruction
- the map of unique strings to translate, keyed by first-seen path
- the deduplication index: trimmed value -> every path that produced it

Only the string map is sent to the provider, which keeps payloads small
for documents with a lot of structure and repeated text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from autotranslate.core.nodes import NodeKind, RichTextDetector, classify, is_rich_text_node
from autotranslate.core.paths import join_index, join_key
from autotranslate.core.skip_policy import DEFAULT_MIN_STRING_LENGTH, WHITESPACE, should_skip
from autotranslate.core.utils import deep_copy

PLACEHOLDER_PREFIX = "__TRANSLATE_"
PLACEHOLDER_SUFFIX = "__"


def make_placeholder(path: str) -> str:
    """Placeholder token standing in for the string at ``path``."""
    return f"{PLACEHOLDER_PREFIX}{path}{PLACEHOLDER_SUFFIX}"


def parse_placeholder(value: str) -> str | None:
    """Return the path encoded in a placeholder token, or None."""
    if (
        len(value) > len(PLACEHOLDER_PREFIX) + len(PLACEHOLDER_SUFFIX)
        and value.startswith(PLACEHOLDER_PREFIX)
        and value.endswith(PLACEHOLDER_SUFFIX)
    ):
        return value[len(PLACEHOLDER_PREFIX):-len(PLACEHOLDER_SUFFIX)]
    return None


# =============================================================================
# Result
# =============================================================================


@dataclass
class ExtractionResult:
    """Output of one extraction pass."""

    metadata: Any
    strings: dict[str, str] = field(default_factory=dict)
    deduplication_index: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.strings

    @property
    def total_instances(self) -> int:
        """Number of leaf strings replaced by placeholders."""
        return sum(len(paths) for paths in self.deduplication_index.values())

    @property
    def deduplication_savings(self) -> int:
        return self.total_instances - len(self.strings)

    def stats(self, original: Any) -> dict[str, Any]:
        """Payload statistics, for debug logging."""
        original_size = len(json.dumps(original, ensure_ascii=False))
        optimized_size = len(json.dumps(self.strings, ensure_ascii=False))
        total = self.total_instances
        return {
            "unique_strings": len(self.strings),
            "total_instances": total,
            "deduplication_savings": self.deduplication_savings,
            "deduplication_percent": round(self.deduplication_savings / total * 100, 1) if total else 0.0,
            "original_size": original_size,
            "optimized_size": optimized_size,
            "size_reduction_percent": (
                round((1 - optimized_size / original_size) * 100, 1) if original_size else 0.0
            ),
        }


# =============================================================================
# Extractor
# =============================================================================


class Extractor:
    """
    Replaces translatable leaf strings with placeholders.

    Usage:
        extractor = Extractor(min_string_length=3)
        result = extractor.extract({"title": "Hello", "body": "Hello"})

        result.strings              # {"title": "Hello"}
        result.deduplication_index  # {"Hello": ["title", "body"]}
        result.metadata             # {"title": "__TRANSLATE_title__", "body": "__TRANSLATE_body__"}
    """

    def __init__(
        self,
        min_string_length: int = DEFAULT_MIN_STRING_LENGTH,
        enable_deduplication: bool = True,
        rich_text_detector: RichTextDetector = is_rich_text_node,
    ):
        self.min_string_length = min_string_length
        self.enable_deduplication = enable_deduplication
        self.rich_text_detector = rich_text_detector

    def extract(self, document: Any, path: str = "") -> ExtractionResult:
        """
        Extract translatable strings from a document.

        Args:
            document: Any JSON-like value
            path: Path prefix for every emitted path

        Returns:
            ExtractionResult with metadata skeleton, strings and dedup index
        """
        result = ExtractionResult(metadata=None)
        result.metadata = self._walk(document, path, result)
        return result

    def _walk(self, node: Any, path: str, result: ExtractionResult) -> Any:
        kind = classify(node, self.rich_text_detector)

        if kind is NodeKind.RICH_TEXT:
            return self._walk_rich_text(node, path, result)
        if kind is NodeKind.SEQUENCE:
            return [self._walk(item, join_index(path, i), result) for i, item in enumerate(node)]
        if kind is NodeKind.MAPPING:
            return {key: self._walk(value, join_key(path, key), result) for key, value in node.items()}
        if kind is NodeKind.TEXT and self._is_translatable(node, path):
            return self._register(node, path, result)
        return node

    def _walk_rich_text(self, node: Any, path: str, result: ExtractionResult) -> Any:
        """
        Walk a rich-text node.

        Only ``text`` leaves of ``type == "text"`` nodes are extracted;
        every other attribute (format, style, version, link fields) is
        copied through unchanged.
        """
        if not isinstance(node, dict):
            return deep_copy(node)

        text = node.get("text")
        if node.get("type") == "text" and isinstance(text, str) and text:
            text_path = join_key(path, "text")
            copied = deep_copy(node)
            if self._is_translatable(text, text_path):
                copied["text"] = self._register(text, text_path, result)
            return copied

        children = node.get("children")
        if isinstance(children, list):
            children_path = join_key(path, "children")
            copied = {key: deep_copy(value) for key, value in node.items() if key != "children"}
            copied["children"] = [
                self._walk_rich_text(child, join_index(children_path, i), result)
                for i, child in enumerate(children)
            ]
            return copied

        return deep_copy(node)

    def _is_translatable(self, value: str, path: str) -> bool:
        return bool(value.strip(WHITESPACE)) and not should_skip(value, path, self.min_string_length)

    def _register(self, value: str, path: str, result: ExtractionResult) -> str:
        trimmed = value.strip(WHITESPACE)
        paths = result.deduplication_index.get(trimmed)

        if paths is None:
            result.deduplication_index[trimmed] = [path]
            result.strings[path] = value
        else:
            paths.append(path)
            # Same trimmed text with different surrounding whitespace is
            # sent on its own so its padding survives reconstruction.
            if not self.enable_deduplication or value != result.strings[paths[0]]:
                result.strings[path] = value

        return make_placeholder(path)


def extract(
    document: Any,
    path: str = "",
    min_string_length: int = DEFAULT_MIN_STRING_LENGTH,
    enable_deduplication: bool = True,
) -> ExtractionResult:
    """Extract with a one-off Extractor (convenience function)."""
    extractor = Extractor(
        min_string_length=min_string_length,
        enable_deduplication=enable_deduplication,
    )
    return extractor.extract(document, path)
