"""
Unit Test Fixtures.

Fixtures for unit tests - storage is in memory.
Unit tests should be fast and isolated, never touching the real data directory.
"""

from unittest.mock import MagicMock

import pytest

from spaced_notes.core.exceptions import StorageError
from spaced_notes.repositories.base import KeyValueStore


@pytest.fixture
def failing_store() -> MagicMock:
    """
    Store whose reads and writes fail like an unreadable data directory.

    Usage:
        def test_errors(failing_store):
            repo = DocumentRepository(failing_store)
            with pytest.raises(StorageError):
                repo.load()
    """
    store = MagicMock(spec=KeyValueStore)
    store.get.side_effect = StorageError("Cannot read store")
    store.set.side_effect = StorageError("Cannot write store")
    return store
