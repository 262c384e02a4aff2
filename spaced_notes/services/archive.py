"""
Archive & Clean Engine.

Archiving cancels a note's outstanding reviews and keeps the reviews that
were actually done as history.
"""

from datetime import date, datetime

from spaced_notes.core.dates import is_before_day
from spaced_notes.schemas.note import Document, Repetition


def _keeps_history(repetition: Repetition, today: date | datetime) -> bool:
    # only past reviews that were done survive
    return is_before_day(repetition.due_date, today) and repetition.is_done


def archive_note_and_clean(
    document: Document,
    note_id: str,
    today: date | datetime,
) -> Document:
    """
    Archive a note and drop its open obligations.

    - note.archived = True (archiving twice is harmless)
    - repetitions due today or later are removed
    - overdue repetitions still pending are removed
    - past repetitions already done are kept

    Other notes are untouched. Unknown note ids leave the document as is.
    The document is modified in place and returned.
    """
    note = document.find_note(note_id)
    if note is None:
        return document

    note.archived = True

    document.repetitions = [
        repetition
        for repetition in document.repetitions
        if repetition.note_id != note_id or _keeps_history(repetition, today)
    ]

    return document
