"""
Core module - the structured-document translation engine.

This module contains:
- paths: path addressing (split, get/set/delete, flatten)
- nodes: node classification shared by every walker
- skip_policy: which leaf strings are translatable
- extraction: placeholder extraction with deduplication
- reconstruction: rebuilding documents from translations
- exclusions: exclusion matching, filtering and merging
- events: write events and the event bus
"""

from autotranslate.core.paths import (
    INTERNAL_FIELDS,
    delete_path,
    field_paths,
    flatten,
    get_value_at_path,
    join_index,
    join_key,
    set_value_at_path,
    split_path,
    to_dotted,
    unflatten,
)

from autotranslate.core.nodes import (
    NodeKind,
    classify,
    is_rich_text_node,
)

from autotranslate.core.skip_policy import (
    DEFAULT_MIN_STRING_LENGTH,
    should_skip,
)

from autotranslate.core.extraction import (
    ExtractionResult,
    Extractor,
    extract,
    make_placeholder,
    parse_placeholder,
)

from autotranslate.core.reconstruction import (
    expand_translations,
    reconstruct,
    unresolved_placeholders,
)

from autotranslate.core.exclusions import (
    filter_excluded_paths,
    is_path_excluded,
    merge_preserved,
)

from autotranslate.core.events import (
    Event,
    EventBus,
    WriteOperation,
    WriteOrigin,
)

__all__ = [
    # Paths
    "INTERNAL_FIELDS",
    "delete_path",
    "field_paths",
    "flatten",
    "get_value_at_path",
    "join_index",
    "join_key",
    "set_value_at_path",
    "split_path",
    "to_dotted",
    "unflatten",
    # Nodes
    "NodeKind",
    "classify",
    "is_rich_text_node",
    # Skip policy
    "DEFAULT_MIN_STRING_LENGTH",
    "should_skip",
    # Extraction / reconstruction
    "ExtractionResult",
    "Extractor",
    "extract",
    "make_placeholder",
    "parse_placeholder",
    "expand_translations",
    "reconstruct",
    "unresolved_placeholders",
    # Exclusions
    "filter_excluded_paths",
    "is_path_excluded",
    "merge_preserved",
    # Events
    "Event",
    "EventBus",
    "WriteOperation",
    "WriteOrigin",
]
