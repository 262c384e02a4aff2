"""
Key-Value Store.

The persistence port every repository depends on: raw bytes addressed by
string keys. Two implementations:

    InMemoryKeyValueStore - dict-backed, for tests and throwaway sessions
    FileKeyValueStore     - one file per key inside a data directory

Usage:
    from spaced_notes.repositories.base import FileKeyValueStore

    store = FileKeyValueStore(Path("data"))
    store.set("spaced-notes-db", b"{}")
    raw = store.get("spaced-notes-db")
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from spaced_notes.core.exceptions import StorageError
from spaced_notes.core.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@runtime_checkable
class KeyValueStore(Protocol):
    """Byte storage addressed by key. Writes replace the whole value."""

    def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None when the key is absent."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key. Absent keys are ignored."""
        ...

    def clear(self) -> None:
        """Remove every key."""
        ...

    def keys(self) -> list[str]:
        """Return the stored keys, sorted. File stores report keys in file-name form."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileKeyValueStore:
    """
    Store each key as a file in a directory.

    Keys are mapped to file names by replacing characters outside
    [A-Za-z0-9._-] with "_". Writes go to a temporary file in the same
    directory which is then renamed over the target, so a reader never
    sees a half-written value.
    """

    suffix = ".json"

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}{self.suffix}"

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("Store read failed", extra={"path": str(path), "error": str(e)})
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=self.suffix)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error("Store write failed", extra={"path": str(path), "error": str(e)})
            raise StorageError(f"Cannot write {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete {key}: {e}") from e

    def clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob(f"*{self.suffix}"):
            path.unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{self.suffix}"))
