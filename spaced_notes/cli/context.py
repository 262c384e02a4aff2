"""
Service Wiring for CLI.

Builds the store and services from config/settings/*.yaml and the
SPACED_NOTES_DATA_DIR override. Each command builds what it needs; nothing
is cached between invocations, so tests can point the data directory
elsewhere and clear the config caches.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date

import typer
from rich.console import Console

from spaced_notes.core.config import get_app_config, get_data_dir
from spaced_notes.core.dates import calendar_day, parse_iso
from spaced_notes.core.exceptions import ApplicationError, ValidationError
from spaced_notes.core.logging import get_logger
from spaced_notes.repositories.base import FileKeyValueStore, KeyValueStore
from spaced_notes.repositories.document import DocumentRepository
from spaced_notes.services.backup import BackupService
from spaced_notes.services.celebration import CelebrationService
from spaced_notes.services.clock import ClockService
from spaced_notes.services.note import NoteService
from spaced_notes.services.reminders import ReminderService

logger = get_logger(__name__)

console = Console()


def get_store() -> KeyValueStore:
    """File store rooted at the configured data directory."""
    return FileKeyValueStore(get_data_dir())


def get_repository(store: KeyValueStore | None = None) -> DocumentRepository:
    storage = get_app_config().storage
    return DocumentRepository(store or get_store(), key=storage.document_key)


def get_note_service(store: KeyValueStore | None = None) -> NoteService:
    scheduling = get_app_config().scheduling
    return NoteService(get_repository(store), reschedule_hour=scheduling.reschedule_hour)


def get_backup_service(store: KeyValueStore | None = None) -> BackupService:
    storage = get_app_config().storage
    return BackupService(get_repository(store), export_prefix=storage.export_prefix)


def get_clock_service(store: KeyValueStore | None = None) -> ClockService:
    storage = get_app_config().storage
    return ClockService(store or get_store(), key=storage.fake_today_key)


def get_celebration_service(store: KeyValueStore | None = None) -> CelebrationService:
    storage = get_app_config().storage
    return CelebrationService(store or get_store(), prefix=storage.congrats_prefix)


def get_reminder_service(store: KeyValueStore | None = None) -> ReminderService:
    app_config = get_app_config()
    store = store or get_store()
    return ReminderService(
        store,
        get_note_service(store),
        key=app_config.storage.reminder_key,
        window_minutes=app_config.scheduling.reminder_window_minutes,
    )


def effective_today(store: KeyValueStore | None = None) -> date:
    return get_clock_service(store).effective_today()


def parse_day(value: str) -> date:
    """
    Parse a day given on the command line.

    Raises:
        ValidationError: If the value is not an ISO-8601 date
    """
    try:
        return calendar_day(parse_iso(value))
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}", details={"date": value}) from e


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Print application errors in red and exit with status 1."""
    try:
        yield
    except ApplicationError as e:
        logger.debug("Command failed", extra={"code": e.code, "error": e.message})
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1) from e
