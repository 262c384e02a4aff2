"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, validate input, and implement business
rules.

Usage:
    from spaced_notes.services.base import BaseService

    class NoteService(BaseService):
        def rename(self, note_id: str, title: str) -> None:
            self._validate_required({"title": title}, ["title"])
            self._mutate("rename", lambda doc: ...)
"""

from typing import Any

from spaced_notes.core.exceptions import StorageError, ValidationError
from spaced_notes.core.logging import get_logger
from spaced_notes.repositories.document import DocumentRepository, DocumentTransform
from spaced_notes.schemas.note import Document


class BaseService:
    """
    Base class for all services.

    Provides:
    - Document repository access
    - Logging context
    - Error logging around store writes
    - Common validation patterns
    """

    def __init__(self, repository: DocumentRepository) -> None:
        """
        Initialize the service with a document repository.

        Args:
            repository: Repository owning the persisted document
        """
        self._repository = repository
        self._logger = get_logger(self.__class__.__module__)

    @property
    def repository(self) -> DocumentRepository:
        """Get the document repository."""
        return self._repository

    def _mutate(self, operation: str, transform: DocumentTransform) -> Document:
        """
        Run a whole-document read-modify-write.

        Args:
            operation: Description of the operation for logging
            transform: Function applied to a copy of the current document

        Returns:
            The document as saved

        Raises:
            StorageError: If the store cannot be read or written
        """
        try:
            return self._repository.mutate(transform)
        except StorageError:
            self._logger.error(
                "Store operation failed",
                extra={"operation": operation},
            )
            raise

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _validate_string_length(
        self,
        value: str,
        field_name: str,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> None:
        """
        Validate string length constraints.

        Raises:
            ValidationError: If string length is out of bounds
        """
        if min_length is not None and len(value) < min_length:
            raise ValidationError(
                f"{field_name} too short",
                details={field_name: f"Minimum length is {min_length}"},
            )
        if max_length is not None and len(value) > max_length:
            raise ValidationError(
                f"{field_name} too long",
                details={field_name: f"Maximum length is {max_length}"},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
