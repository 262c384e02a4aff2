"""
Note Service.

Business logic layer for notes and their repetitions. Every mutator is a
whole-document read-modify-write through the DocumentRepository; ids that
no longer exist turn a mutator into a silent no-op.

Read queries skip orphan repetitions (those whose note is missing from the
document), which can only appear when the stored file was edited by hand.
"""

from datetime import date, datetime

from spaced_notes.core.dates import (
    DayLike,
    is_before_day,
    is_due_on_date,
    local_now,
    parse_iso,
)
from spaced_notes.core.exceptions import NotFoundError, ValidationError
from spaced_notes.repositories.document import DocumentRepository
from spaced_notes.schemas.note import (
    Attachment,
    Document,
    Note,
    Repetition,
    RepetitionStatus,
    ScheduledReview,
)
from spaced_notes.services.archive import archive_note_and_clean
from spaced_notes.services.base import BaseService
from spaced_notes.services.reschedule import (
    DEFAULT_RESCHEDULE_HOUR,
    reschedule_from_repetition,
)
from spaced_notes.services.scheduler import create_schedule

TITLE_MAX_LENGTH = 255


def _sort_day_items(items: list[ScheduledReview]) -> list[ScheduledReview]:
    # pending first, then curve position
    return sorted(
        items,
        key=lambda item: (not item.repetition.is_pending, item.repetition.index),
    )


class NoteService(BaseService):
    """
    Service for note and repetition business logic.

    Handles note creation, edits, the review state machine, rescheduling,
    archiving and the day/overdue queries.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        reschedule_hour: int = DEFAULT_RESCHEDULE_HOUR,
    ) -> None:
        super().__init__(repository)
        self.reschedule_hour = reschedule_hour

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_document(self) -> Document:
        """Load the whole document."""
        return self.repository.load()

    def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        note = self.repository.load().find_note(note_id)
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        return note

    def list_notes(self, include_archived: bool = False) -> list[Note]:
        """List notes, newest first. Archived notes only when requested."""
        notes = self.repository.load().notes
        if not include_archived:
            notes = [n for n in notes if not n.archived]
        return sorted(notes, key=lambda n: n.created_at, reverse=True)

    def repetitions_for_note(self, note_id: str) -> list[Repetition]:
        """All repetitions of a note in curve order."""
        return self.repository.load().repetitions_for(note_id)

    def repetitions_for_day(self, day: DayLike, today: DayLike) -> list[ScheduledReview]:
        """
        Repetitions due on a calendar day, joined with their notes.

        Archived notes are hidden unless the day is already in the past,
        where their completed reviews remain visible as history.

        Returns:
            Items sorted pending first, then by curve index
        """
        document = self.repository.load()
        notes_by_id = {n.id: n for n in document.notes}
        is_past_day = is_before_day(day, today)

        items = []
        for repetition in document.repetitions:
            if not is_due_on_date(repetition.due_date, day):
                continue
            note = notes_by_id.get(repetition.note_id)
            if note is None:
                continue
            if note.archived and not is_past_day:
                continue
            items.append(ScheduledReview(note=note, repetition=repetition))

        return _sort_day_items(items)

    def overdue_repetitions(self, today: DayLike) -> list[ScheduledReview]:
        """
        Pending repetitions due before today on non-archived notes.

        Returns:
            Items sorted by due date, most recent first
        """
        document = self.repository.load()
        notes_by_id = {n.id: n for n in document.notes}

        items = []
        for repetition in document.repetitions:
            if not repetition.is_pending:
                continue
            if not is_before_day(repetition.due_date, today):
                continue
            note = notes_by_id.get(repetition.note_id)
            if note is None or note.archived:
                continue
            items.append(ScheduledReview(note=note, repetition=repetition))

        return sorted(items, key=lambda item: item.repetition.due_date, reverse=True)

    def count_pending_due_on(self, day: DayLike) -> int:
        """Number of pending repetitions due on a calendar day."""
        document = self.repository.load()
        note_ids = {n.id for n in document.notes}
        return sum(
            1
            for repetition in document.repetitions
            if repetition.is_pending
            and repetition.note_id in note_ids
            and is_due_on_date(repetition.due_date, day)
        )

    def stats(self) -> dict[str, int]:
        """Counts of notes and repetitions in the document."""
        document = self.repository.load()
        return {
            "notes": len(document.notes),
            "archived_notes": sum(1 for n in document.notes if n.archived),
            "repetitions": len(document.repetitions),
            "pending": sum(1 for r in document.repetitions if r.is_pending),
            "done": sum(1 for r in document.repetitions if r.is_done),
        }

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    def _clean_title(self, title: str) -> str:
        self._validate_required({"title": title}, ["title"])
        cleaned = title.strip()
        self._validate_string_length(cleaned, "title", max_length=TITLE_MAX_LENGTH)
        return cleaned

    def create_note_with_optional_attachment(
        self,
        title: str,
        attachment: Attachment | None = None,
        created_at: datetime | None = None,
    ) -> Note:
        """
        Create a note with its six scheduled repetitions.

        Args:
            title: Note title, must not be blank
            attachment: Optional file to embed in the note
            created_at: Creation instant, defaults to now

        Returns:
            Created note

        Raises:
            ValidationError: If the title is blank or too long
        """
        cleaned = self._clean_title(title)
        note, repetitions = create_schedule(cleaned, created_at)
        if attachment is not None:
            note.attachment = attachment

        self._log_operation("Creating note", note_id=note.id, has_attachment=attachment is not None)

        def _append(document: Document) -> None:
            document.notes.append(note)
            document.repetitions.extend(repetitions)

        self._mutate("create_note", _append)
        return note

    def update_note_title(self, note_id: str, new_title: str) -> None:
        """
        Rename a note. Unknown ids are ignored.

        Raises:
            ValidationError: If the new title is blank or too long
        """
        cleaned = self._clean_title(new_title)

        def _rename(document: Document) -> None:
            note = document.find_note(note_id)
            if note is None:
                self._log_debug("Rename skipped, note not found", note_id=note_id)
                return
            note.title = cleaned

        self._mutate("update_note_title", _rename)

    def update_note_attachment(self, note_id: str, attachment: Attachment | None) -> None:
        """Replace a note's attachment, or remove it with None. Unknown ids are ignored."""

        def _set_attachment(document: Document) -> None:
            note = document.find_note(note_id)
            if note is None:
                self._log_debug("Attachment update skipped, note not found", note_id=note_id)
                return
            note.attachment = attachment

        self._log_operation(
            "Updating attachment",
            note_id=note_id,
            removed=attachment is None,
        )
        self._mutate("update_note_attachment", _set_attachment)

    def archive_note_and_clean(self, note_id: str, today: DayLike) -> None:
        """
        Archive a note, dropping its future and overdue-pending repetitions.

        Completed past repetitions are kept as history. Unknown ids are ignored.
        """
        self._log_operation("Archiving note", note_id=note_id)
        self._mutate(
            "archive_note",
            lambda document: archive_note_and_clean(document, note_id, today),
        )

    def reschedule_from_repetition(
        self,
        note_id: str,
        from_index: int,
        new_base_date: date | datetime | str,
    ) -> None:
        """
        Move repetition from_index of a note to a new date and shift the
        later pending repetitions with it.

        Args:
            note_id: Note whose repetitions move
            from_index: Curve index of the repetition the user moved
            new_base_date: New date, as a date/datetime or an ISO-8601 string

        Raises:
            ValidationError: If new_base_date is a string that is not a valid date
        """
        if isinstance(new_base_date, str):
            try:
                new_base_date = parse_iso(new_base_date)
            except ValueError as e:
                raise ValidationError(
                    "Invalid date",
                    details={"new_base_date": str(e)},
                ) from e

        self._log_operation(
            "Rescheduling note",
            note_id=note_id,
            from_index=from_index,
            new_base_date=str(new_base_date),
        )
        self._mutate(
            "reschedule",
            lambda document: reschedule_from_repetition(
                document,
                note_id,
                from_index,
                new_base_date,
                hour=self.reschedule_hour,
            ),
        )

    # -------------------------------------------------------------------------
    # Repetitions
    # -------------------------------------------------------------------------

    def update_repetition(self, updated: Repetition) -> None:
        """Replace the stored repetition having the same id. Unknown ids are ignored."""

        def _replace(document: Document) -> None:
            for position, repetition in enumerate(document.repetitions):
                if repetition.id == updated.id:
                    document.repetitions[position] = updated.model_copy(deep=True)
                    return
            self._log_debug("Repetition update skipped, not found", repetition_id=updated.id)

        self._mutate("update_repetition", _replace)

    def toggle_reviewed(self, repetition_id: str, now: datetime | None = None) -> Repetition | None:
        """
        Flip a repetition between pending and done (day view).

        Marking done stamps reviewed_at; going back to pending clears it.

        Returns:
            The updated repetition, or None if it does not exist
        """
        current = self.repository.load().find_repetition(repetition_id)
        if current is None:
            return None

        if current.is_pending:
            updated = current.model_copy(
                update={
                    "status": RepetitionStatus.DONE,
                    "reviewed_at": now or local_now(),
                }
            )
        else:
            updated = current.model_copy(
                update={"status": RepetitionStatus.PENDING, "reviewed_at": None}
            )

        self._log_operation(
            "Toggling review",
            repetition_id=repetition_id,
            status=updated.status.value,
        )
        self.update_repetition(updated)
        return updated

    def mark_overdue_reviewed(
        self,
        repetition_id: str,
        now: datetime | None = None,
    ) -> Repetition | None:
        """
        Mark an overdue repetition done (overdue view).

        One way only: a repetition that is already done stays done and
        keeps its original reviewed_at.

        Returns:
            The repetition after the call, or None if it does not exist
        """
        current = self.repository.load().find_repetition(repetition_id)
        if current is None:
            return None
        if current.is_done:
            return current

        updated = current.model_copy(
            update={
                "status": RepetitionStatus.DONE,
                "reviewed_at": now or local_now(),
            }
        )
        self._log_operation("Marking overdue review done", repetition_id=repetition_id)
        self.update_repetition(updated)
        return updated

    def delete_repetition(self, repetition_id: str) -> None:
        """Remove a repetition. Deleting an absent id does nothing."""

        def _delete(document: Document) -> None:
            document.repetitions = [
                r for r in document.repetitions if r.id != repetition_id
            ]

        self._log_operation("Deleting repetition", repetition_id=repetition_id)
        self._mutate("delete_repetition", _delete)
