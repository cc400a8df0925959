"""
Node classification shared by every document walker.

The extractor, the exclusion filter and the reconstructor all dispatch on
the same closed set of node kinds, decided here in one place.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

RichTextDetector = Callable[[Any], bool]


class NodeKind(str, Enum):
    """Kinds of node found in a document."""

    NULL = "null"
    TEXT = "text"  # str leaf
    SCALAR = "scalar"  # number, bool, anything else that is not a container
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RICH_TEXT = "rich_text"  # rich-text editor node (type + version + children/text)


def is_rich_text_node(node: Any) -> bool:
    """
    Duck-typed rich-text node check.

    A mapping is a rich-text node when it has both ``type`` and ``version``
    and at least one of ``children`` or ``text``. Plain objects that happen
    to carry those keys are classified the same way.
    """
    return (
        isinstance(node, dict)
        and "type" in node
        and "version" in node
        and ("children" in node or "text" in node)
    )


def classify(node: Any, detector: RichTextDetector = is_rich_text_node) -> NodeKind:
    """Classify a document node."""
    if node is None:
        return NodeKind.NULL
    if isinstance(node, str):
        return NodeKind.TEXT
    if isinstance(node, dict):
        return NodeKind.RICH_TEXT if detector(node) else NodeKind.MAPPING
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR
