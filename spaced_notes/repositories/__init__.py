"""
Repositories.

Data access for the persisted document and the small per-key records
(celebration markers, reminder settings, debug clock).
"""

from spaced_notes.repositories.base import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)
from spaced_notes.repositories.document import DocumentRepository

__all__ = [
    "DocumentRepository",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
]
