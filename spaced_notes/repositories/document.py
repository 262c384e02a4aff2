"""
Document Repository.

Data access layer for the single persisted document (notes + repetitions).
Every change is a whole-document read-modify-write: load, transform an
in-memory copy, save. There is no locking or diffing; when two processes
write concurrently the last save wins.

Corruption policy: a stored value that is not valid JSON, or that does not
validate as a Document, is replaced by an empty document. Nothing is
repaired partially and no exception reaches the caller.
"""

from collections.abc import Callable

from pydantic import ValidationError as PydanticValidationError

from spaced_notes.core.logging import get_logger
from spaced_notes.repositories.base import KeyValueStore
from spaced_notes.schemas.note import Document

logger = get_logger(__name__)

DEFAULT_DOCUMENT_KEY = "spaced-notes-db"

DocumentTransform = Callable[[Document], Document | None]


def parse_document(raw: bytes | str) -> Document:
    """
    Validate serialized text as a Document.

    Raises:
        pydantic.ValidationError: If the text is not JSON or has the wrong shape
    """
    return Document.model_validate_json(raw)


def serialize_document(document: Document, indent: int | None = None) -> str:
    """Serialize a Document to its on-disk JSON form (camelCase keys)."""
    return document.model_dump_json(by_alias=True, indent=indent)


class DocumentRepository:
    """
    Repository for the persisted Document.

    Depends only on a KeyValueStore, so tests can run against
    InMemoryKeyValueStore.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_DOCUMENT_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> Document:
        """
        Load the document.

        Returns an empty document (and persists it) when nothing is stored
        yet or when the stored value is corrupt.
        """
        raw = self.store.get(self.key)
        if raw is None:
            logger.debug("No document stored, initializing", extra={"key": self.key})
            return self.reset()

        try:
            return parse_document(raw)
        except PydanticValidationError as e:
            logger.warning(
                "Stored document is corrupt, resetting to empty",
                extra={"key": self.key, "errors": e.error_count()},
            )
            return self.reset()

    def save(self, document: Document) -> None:
        """Overwrite the stored document in a single write."""
        self.store.set(self.key, serialize_document(document).encode("utf-8"))

    def reset(self) -> Document:
        """Replace the stored document with an empty one and return it."""
        empty = Document.empty()
        self.save(empty)
        return empty

    def mutate(self, transform: DocumentTransform) -> Document:
        """
        Apply a whole-document transformation and persist the result.

        The transform receives a private copy. It may mutate it in place and
        return None, or return a new Document.

        Returns:
            The document as saved
        """
        current = self.load()
        working = current.model_copy(deep=True)
        result = transform(working)
        updated = working if result is None else result
        self.save(updated)
        return updated

    def export_json(self) -> str:
        """Return the stored document as pretty-printed JSON."""
        return serialize_document(self.load(), indent=2)

    def import_json(self, text: str | bytes) -> bool:
        """
        Replace the stored document with an imported one.

        The payload is validated in full before anything is written. On
        failure the existing data is left untouched.

        Returns:
            True if the document was replaced, False if the payload was rejected
        """
        try:
            document = parse_document(text)
        except PydanticValidationError as e:
            logger.warning(
                "Import rejected",
                extra={"key": self.key, "errors": e.error_count()},
            )
            return False

        self.save(document)
        logger.info(
            "Document imported",
            extra={"notes": len(document.notes), "repetitions": len(document.repetitions)},
        )
        return True
