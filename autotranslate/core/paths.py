"""
Path addressing for nested documents.

A path names one node in a document by joining object keys with ``.``
and array indices with brackets, e.g. ``content[0].description.children[2].text``.
Exclusion paths written by editors use dot segments for indices instead
(``content.0.title``); both spellings parse to the same segment list.
"""

from __future__ import annotations

import re
from typing import Any

Segment = str | int

_SEGMENT_RE = re.compile(r"\[(\d+)\]|([^.\[\]]+)")

# Bookkeeping fields written by the content store, never offered for
# exclusion and never overwritten by a translation merge.
INTERNAL_FIELDS = frozenset({"id", "_id", "createdAt", "updatedAt", "translationSync", "__v"})


# =============================================================================
# Building and parsing
# =============================================================================


def join_key(prefix: str, key: str) -> str:
    """Extend a path with an object key."""
    return f"{prefix}.{key}" if prefix else key


def join_index(prefix: str, index: int) -> str:
    """Extend a path with an array index."""
    return f"{prefix}[{index}]"


def split_path(path: str) -> list[Segment]:
    """
    Split a path into segments.

    Bracketed indices and purely numeric dot segments become ints.

    >>> split_path("content[0].title")
    ['content', 0, 'title']
    >>> split_path("content.0.title")
    ['content', 0, 'title']
    """
    segments: list[Segment] = []
    for match in _SEGMENT_RE.finditer(path):
        index, key = match.groups()
        if index is not None:
            segments.append(int(index))
        elif key.isdigit():
            segments.append(int(key))
        else:
            segments.append(key)
    return segments


def to_dotted(path: str) -> str:
    """Normalize a path to dot notation (``a[0].b`` -> ``a.0.b``)."""
    return ".".join(str(s) for s in split_path(path))


# =============================================================================
# Access
# =============================================================================


def _step(current: Any, segment: Segment) -> tuple[bool, Any]:
    if isinstance(current, list):
        if isinstance(segment, int) and 0 <= segment < len(current):
            return True, current[segment]
        return False, None
    if isinstance(current, dict):
        key = str(segment) if isinstance(segment, int) else segment
        if key in current:
            return True, current[key]
    return False, None


def has_path(document: Any, path: str) -> bool:
    current = document
    for segment in split_path(path):
        found, current = _step(current, segment)
        if not found:
            return False
    return True


def get_value_at_path(document: Any, path: str, default: Any = None) -> Any:
    """Get the value at a path, or ``default`` if any segment is missing."""
    current = document
    for segment in split_path(path):
        found, current = _step(current, segment)
        if not found:
            return default
    return current


def set_value_at_path(document: Any, path: str, value: Any) -> None:
    """
    Set the value at a path, creating intermediate containers.

    Missing intermediates become lists when the next segment is an
    index and dicts otherwise. Lists are padded with ``None``.
    """
    segments = split_path(path)
    if not segments:
        raise ValueError("Cannot set the document root")

    current = document
    for segment, following in zip(segments, segments[1:]):
        found, child = _step(current, segment)
        if not found or not isinstance(child, (dict, list)):
            child = [] if isinstance(following, int) else {}
            _assign(current, segment, child)
        current = child
    _assign(current, segments[-1], value)


def _assign(container: Any, segment: Segment, value: Any) -> None:
    if isinstance(container, list):
        if not isinstance(segment, int):
            raise TypeError(f"Cannot use key '{segment}' on a list")
        while len(container) <= segment:
            container.append(None)
        container[segment] = value
    elif isinstance(container, dict):
        container[str(segment) if isinstance(segment, int) else segment] = value
    else:
        raise TypeError(f"Cannot set '{segment}' on {type(container).__name__}")


def delete_path(document: Any, path: str) -> bool:
    """
    Remove the value at a path.

    Dict keys are deleted; list positions are set to ``None`` so the
    indices of the remaining elements stay stable.

    Returns:
        True if something was removed
    """
    segments = split_path(path)
    if not segments:
        return False

    current = document
    for segment in segments[:-1]:
        found, current = _step(current, segment)
        if not found:
            return False

    last = segments[-1]
    if isinstance(current, list) and isinstance(last, int) and last < len(current):
        current[last] = None
        return True
    if isinstance(current, dict):
        key = str(last) if isinstance(last, int) else last
        if key in current:
            del current[key]
            return True
    return False


# =============================================================================
# Flattening
# =============================================================================


def flatten(document: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten a document into ``{path: leaf}``.

    Empty dicts and lists are kept as leaves so ``unflatten`` can
    rebuild the same shape.
    """
    flat: dict[str, Any] = {}

    def walk(node: Any, path: str) -> None:
        if isinstance(node, dict) and node:
            for key, value in node.items():
                walk(value, join_key(path, key))
        elif isinstance(node, list) and node:
            for index, value in enumerate(node):
                walk(value, join_index(path, index))
        else:
            flat[path] = node

    walk(document, prefix)
    return flat


def unflatten(flat: dict[str, Any]) -> Any:
    """Rebuild a document from the output of ``flatten``."""
    if not flat:
        return {}
    if "" in flat:
        return flat[""]

    first = split_path(next(iter(flat)))
    root: Any = [] if isinstance(first[0], int) else {}
    for path, value in flat.items():
        set_value_at_path(root, path, value)
    return root


def field_paths(document: Any, prefix: str = "") -> list[str]:
    """
    List every field path of a document in dot notation.

    Internal bookkeeping fields are skipped. Array elements contribute
    the paths of their fields (``content.0.title``), not the element itself.
    """
    paths: list[str] = []
    if not isinstance(document, dict):
        return paths

    for key, value in document.items():
        if key in INTERNAL_FIELDS:
            continue
        current = join_key(prefix, key)
        paths.append(current)

        if isinstance(value, dict):
            paths.extend(field_paths(value, current))
        elif isinstance(value, list):
            for index, item in enumerate(value):
                if isinstance(item, dict):
                    paths.extend(field_paths(item, f"{current}.{index}"))

    return paths
