"""
Backup Service.

Export and import of the whole document as a JSON file. The export format
is exactly the persisted format, so any export can be imported back.
"""

from pathlib import Path

from spaced_notes.core.dates import DayLike, calendar_day
from spaced_notes.repositories.document import DocumentRepository
from spaced_notes.services.base import BaseService

DEFAULT_EXPORT_PREFIX = "spaced-notes-backup"


def export_filename(today: DayLike, prefix: str = DEFAULT_EXPORT_PREFIX) -> str:
    """Default export file name, e.g. spaced-notes-backup-2024-01-01.json."""
    return f"{prefix}-{calendar_day(today).isoformat()}.json"


class BackupService(BaseService):
    """Service for document export and import."""

    def __init__(
        self,
        repository: DocumentRepository,
        export_prefix: str = DEFAULT_EXPORT_PREFIX,
    ) -> None:
        super().__init__(repository)
        self.export_prefix = export_prefix

    def export_document(self) -> str:
        """Return the current document as pretty-printed JSON."""
        return self.repository.export_json()

    def default_export_path(self, directory: Path, today: DayLike) -> Path:
        return Path(directory) / export_filename(today, self.export_prefix)

    def write_export(self, path: Path) -> Path:
        """
        Write the export to a file, creating parent directories.

        Returns:
            The path written
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_document(), encoding="utf-8")
        self._log_operation("Document exported", path=str(path))
        return path

    def import_document(self, text: str | bytes) -> bool:
        """
        Replace the stored document with the given JSON.

        Returns:
            True on success. False if the payload was rejected, in which
            case the stored data is unchanged.
        """
        return self.repository.import_json(text)

    def import_file(self, path: Path) -> bool:
        """
        Import a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        data = Path(path).read_bytes()
        imported = self.import_document(data)
        self._log_operation("Import finished", path=str(path), imported=imported)
        return imported
