"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Storage:
    Unit tests run against InMemoryKeyValueStore; nothing touches the real
    data directory. Integration tests point SPACED_NOTES_DATA_DIR at a
    temporary directory (see tests/integration/conftest.py).

Dates:
    Fixed instants are timezone-aware local datetimes, so calendar-day
    comparisons behave the same on any machine timezone.
"""

import time
from datetime import date, datetime

import pytest

from spaced_notes.repositories.base import InMemoryKeyValueStore
from spaced_notes.repositories.document import DocumentRepository
from spaced_notes.services.backup import BackupService
from spaced_notes.services.note import NoteService


def local_instant(year: int, month: int, day: int, hour: int = 9, minute: int = 0) -> datetime:
    """Timezone-aware local datetime for the given wall-clock time."""
    return datetime(year, month, day, hour, minute).astimezone()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> DocumentRepository:
    """Document repository over the in-memory store."""
    return DocumentRepository(store)


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def note_service(repository: DocumentRepository) -> NoteService:
    """NoteService over the in-memory repository."""
    return NoteService(repository)


@pytest.fixture
def backup_service(repository: DocumentRepository) -> BackupService:
    """BackupService over the in-memory repository."""
    return BackupService(repository)


# =============================================================================
# Date Fixtures
# =============================================================================


@pytest.fixture
def base_instant() -> datetime:
    """2024-01-01 09:00 local, the creation instant used across tests."""
    return local_instant(2024, 1, 1)


@pytest.fixture
def today() -> date:
    """A fixed "today" a few weeks after base_instant."""
    return date(2024, 1, 20)


@pytest.fixture
def at():
    """
    Factory for local instants.

    Usage:
        def test_due(at):
            instant = at(2024, 1, 8, hour=12)
    """
    return local_instant


@pytest.fixture
def paris_tz(monkeypatch):
    """
    Run the test with the process timezone set to Europe/Paris.

    Paris switches to summer time on 2024-03-31 and back on 2024-10-27.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Europe/Paris")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
