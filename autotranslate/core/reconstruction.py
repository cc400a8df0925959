"""
Reconstruction of translated documents from placeholder skeletons.
"""

from __future__ import annotations

from typing import Any, Mapping

from autotranslate.core.extraction import parse_placeholder
from autotranslate.core.nodes import NodeKind, classify
from autotranslate.core.paths import join_index, join_key


def expand_translations(
    translations: Mapping[str, str],
    deduplication_index: Mapping[str, list[str]],
) -> dict[str, str]:
    """
    Spread each translation to every path that shared its source string.

    The first path of each index entry is the canonical one, i.e. the one
    that was sent for translation. Paths that received their own
    translation keep it.
    """
    full = dict(translations)
    for paths in deduplication_index.values():
        if not paths or paths[0] not in translations:
            continue
        translated = translations[paths[0]]
        for path in paths[1:]:
            full.setdefault(path, translated)
    return full


def reconstruct(
    metadata: Any,
    translations: Mapping[str, str],
    deduplication_index: Mapping[str, list[str]],
    path: str = "",
) -> Any:
    """
    Rebuild a document by replacing placeholders with translations.

    A placeholder is only substituted at the position it was created for
    (its encoded path equals the current path), so a literal token that
    happens to appear elsewhere in the data is never rewritten. Placeholders
    without a translation are left as-is.

    Args:
        metadata: Skeleton produced by the extractor
        translations: path -> translated string, as returned by the provider
        deduplication_index: Index produced by the same extraction
        path: Path prefix that was passed to the extractor
    """
    full = expand_translations(translations, deduplication_index)

    def walk(node: Any, current: str) -> Any:
        kind = classify(node)
        if kind is NodeKind.SEQUENCE:
            return [walk(item, join_index(current, i)) for i, item in enumerate(node)]
        if kind in (NodeKind.MAPPING, NodeKind.RICH_TEXT):
            return {key: walk(value, join_key(current, key)) for key, value in node.items()}
        if kind is NodeKind.TEXT and parse_placeholder(node) == current:
            return full.get(current, node)
        return node

    return walk(metadata, path)


def unresolved_placeholders(document: Any, path: str = "") -> list[str]:
    """Paths whose placeholder was not replaced by a translation."""
    unresolved: list[str] = []

    def walk(node: Any, current: str) -> None:
        kind = classify(node)
        if kind is NodeKind.SEQUENCE:
            for i, item in enumerate(node):
                walk(item, join_index(current, i))
        elif kind in (NodeKind.MAPPING, NodeKind.RICH_TEXT):
            for key, value in node.items():
                walk(value, join_key(current, key))
        elif kind is NodeKind.TEXT and parse_placeholder(node) == current:
            unresolved.append(current)

    walk(document, path)
    return unresolved
