"""
Storage abstractions.

- DocumentStorage → the host content store (localized documents)
- MetadataStorage → plugin records (exclusions, translation settings)
"""

from autotranslate.storage.base import (
    DocumentStorage,
    MetadataStorage,
    StorageProvider,
)
from autotranslate.storage.local import (
    InMemoryDocumentStorage,
    InMemoryMetadataStorage,
    create_local_storage,
)

__all__ = [
    "DocumentStorage",
    "MetadataStorage",
    "StorageProvider",
    "InMemoryDocumentStorage",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
