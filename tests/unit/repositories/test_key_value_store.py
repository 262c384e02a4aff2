"""
Unit Tests for Key-Value Stores.

Both implementations are exercised through the same port; the file store
additionally uses tmp_path for its on-disk behavior.
"""

from unittest.mock import patch

import pytest

from spaced_notes.core.exceptions import StorageError
from spaced_notes.repositories.base import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path) -> KeyValueStore:
    """Each test runs against both store implementations."""
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return FileKeyValueStore(tmp_path / "data")


class TestKeyValueStorePort:
    """Behavior shared by every store."""

    def test_implements_protocol(self, any_store):
        assert isinstance(any_store, KeyValueStore)

    def test_missing_key_returns_none(self, any_store):
        assert any_store.get("absent") is None

    def test_set_then_get(self, any_store):
        any_store.set("spaced-notes-db", b'{"notes": []}')
        assert any_store.get("spaced-notes-db") == b'{"notes": []}'

    def test_set_replaces_value(self, any_store):
        any_store.set("k", b"first")
        any_store.set("k", b"second")
        assert any_store.get("k") == b"second"

    def test_delete_is_idempotent(self, any_store):
        any_store.set("k", b"v")
        any_store.delete("k")
        any_store.delete("k")
        assert any_store.get("k") is None

    def test_clear_removes_every_key(self, any_store):
        any_store.set("a", b"1")
        any_store.set("spaced-notes-congrats:2024-01-01", b"1")
        any_store.clear()
        assert any_store.get("a") is None
        assert any_store.get("spaced-notes-congrats:2024-01-01") is None
        assert any_store.keys() == []


class TestFileKeyValueStore:
    """On-disk behavior of FileKeyValueStore."""

    def test_creates_directory_on_first_write(self, tmp_path):
        directory = tmp_path / "nested" / "data"
        store = FileKeyValueStore(directory)

        store.set("spaced-notes-db", b"{}")

        assert (directory / "spaced-notes-db.json").read_bytes() == b"{}"

    def test_unsafe_key_characters_are_replaced(self, tmp_path):
        store = FileKeyValueStore(tmp_path)

        store.set("spaced-notes-congrats:2024-01-01", b"1")

        assert (tmp_path / "spaced-notes-congrats_2024-01-01.json").exists()
        assert store.get("spaced-notes-congrats:2024-01-01") == b"1"

    def test_values_survive_a_new_instance(self, tmp_path):
        FileKeyValueStore(tmp_path).set("k", b"persisted")
        assert FileKeyValueStore(tmp_path).get("k") == b"persisted"

    def test_write_leaves_no_temporary_files(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("k", b"v")
        store.set("k", b"w")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_failed_write_keeps_previous_value(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("k", b"old")

        with patch("spaced_notes.repositories.base.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError, match="Cannot write"):
                store.set("k", b"new")

        assert store.get("k") == b"old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_unreadable_value_raises_storage_error(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        # a directory where the value file should be
        (tmp_path / "k.json").mkdir()

        with pytest.raises(StorageError, match="Cannot read"):
            store.get("k")

    def test_keys_lists_stored_files(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("b", b"2")
        store.set("a", b"1")
        assert store.keys() == ["a", "b"]

    def test_clear_on_missing_directory(self, tmp_path):
        FileKeyValueStore(tmp_path / "never-created").clear()
        assert not (tmp_path / "never-created").exists()
