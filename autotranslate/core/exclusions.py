"""
Exclusion matching, filtering and merging.

Excluded paths are field paths an editor pinned for one locale. They are
stripped from the source document before extraction, so excluded content
never reaches a provider prompt, and restored from the existing target
document after reconstruction, so it is never overwritten.

Matching is index-agnostic: where both the excluded path and the candidate
path have a numeric segment at the same position, any index matches
(``content.0.title`` also excludes ``content.3.title``).
"""

from __future__ import annotations

from typing import Any, Iterable

from autotranslate.core.paths import (
    INTERNAL_FIELDS,
    get_value_at_path,
    set_value_at_path,
    split_path,
    to_dotted,
)
from autotranslate.core.utils import deep_copy


def _is_index(segment: str) -> bool:
    return segment.isdigit()


def is_path_excluded(path: str, excluded_paths: Iterable[str]) -> bool:
    """
    Check whether ``path`` or one of its ancestors is excluded.

    Both dot and bracket index notations are accepted.
    """
    path = to_dotted(path)
    path_parts = path.split(".")

    for excluded in excluded_paths:
        excluded = to_dotted(excluded)
        if not excluded:
            continue
        if path == excluded or path.startswith(f"{excluded}."):
            return True

        excluded_parts = excluded.split(".")
        if len(excluded_parts) > len(path_parts):
            continue
        if all(
            e == p or (_is_index(e) and _is_index(p))
            for e, p in zip(excluded_parts, path_parts)
        ):
            return True

    return False


def filter_excluded_paths(document: Any, excluded_paths: Iterable[str]) -> Any:
    """
    Deep copy of ``document`` with every excluded subtree removed.

    Excluded object keys are dropped. Excluded array elements are replaced
    by ``None`` so sibling indices, and therefore paths, stay stable.
    """
    excluded = [p for p in excluded_paths if p]
    if not excluded or not isinstance(document, (dict, list)):
        return deep_copy(document)

    def walk(node: Any, path: str) -> Any:
        if isinstance(node, dict):
            result = {}
            for key, value in node.items():
                child = f"{path}.{key}" if path else str(key)
                if not is_path_excluded(child, excluded):
                    result[key] = walk(value, child)
            return result
        if isinstance(node, list):
            items = []
            for index, value in enumerate(node):
                child = f"{path}.{index}" if path else str(index)
                items.append(None if is_path_excluded(child, excluded) else walk(value, child))
            return items
        return node

    return walk(document, "")


def _parent_exists(document: Any, path: str) -> bool:
    segments = split_path(path)
    parent_path = ".".join(str(s) for s in segments[:-1])
    parent = get_value_at_path(document, parent_path) if parent_path else document
    last = segments[-1]
    if isinstance(parent, dict):
        return True
    if isinstance(parent, list):
        return isinstance(last, int) and last < len(parent)
    return False


def merge_preserved(
    translated: Any,
    existing: Any,
    excluded_paths: Iterable[str],
) -> Any:
    """
    Merge excluded values of the existing target document into a translation.

    Starts from a copy of ``translated``; never mutates either argument.
    Every excluded path present in ``existing`` is copied over, provided its
    parent container exists in the translation. Internal bookkeeping fields
    of ``existing`` are kept as well.

    Args:
        translated: Reconstructed document for the target locale
        existing: The target locale's current document, or None
        excluded_paths: Paths pinned for the target locale
    """
    merged = deep_copy(translated)
    if not isinstance(merged, dict):
        return merged

    excluded = [p for p in excluded_paths if p]
    if not isinstance(existing, dict):
        existing = None

    def walk(node: Any, path: str) -> None:
        if path and is_path_excluded(path, excluded):
            if _parent_exists(merged, path):
                set_value_at_path(merged, path, deep_copy(node))
            return
        if isinstance(node, dict):
            for key, value in node.items():
                walk(value, f"{path}.{key}" if path else str(key))
        elif isinstance(node, list):
            for index, value in enumerate(node):
                walk(value, f"{path}.{index}")

    if excluded:
        if existing is not None:
            walk(existing, "")
        _drop_unrestored_slots(merged, existing, excluded)

    if existing is not None:
        for key in INTERNAL_FIELDS:
            if key in existing:
                merged[key] = deep_copy(existing[key])

    return merged


def _drop_unrestored_slots(document: Any, existing: Any, excluded: list[str]) -> None:
    """
    Pop trailing ``None`` list slots left by the filter for excluded
    elements that the existing document had no value for.

    Slots before a kept element stay, so sibling indices do not shift.
    """

    def walk(node: Any, path: str) -> None:
        if isinstance(node, dict):
            for key, value in node.items():
                walk(value, f"{path}.{key}" if path else str(key))
        elif isinstance(node, list):
            for index, value in enumerate(node):
                walk(value, f"{path}.{index}")
            restorable = get_value_at_path(existing, path) if existing is not None else None
            restorable_len = len(restorable) if isinstance(restorable, list) else 0
            while node and node[-1] is None:
                last = len(node) - 1
                if last < restorable_len or not is_path_excluded(f"{path}.{last}", excluded):
                    break
                node.pop()

    walk(document, "")
