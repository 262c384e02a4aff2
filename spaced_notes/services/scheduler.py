"""
Scheduler.

Turns a new note into its fixed sequence of six reviews. The interval curve
is a constant; nothing here adapts to how reviews went.
"""

from datetime import datetime
from uuid import uuid4

from spaced_notes.core.dates import add_days, local_now
from spaced_notes.schemas.note import Document, Note, Repetition, RepetitionStatus

# Days after the base date at which reviews 1..6 fall due
SPACED_INTERVALS_DAYS: tuple[int, ...] = (1, 7, 15, 30, 90, 180)


def generate_id(prefix: str) -> str:
    """Return a collision-resistant id such as 'note_3f2a...'."""
    return f"{prefix}_{uuid4().hex}"


def interval_for_index(index: int) -> int | None:
    """Day offset of a 1-based curve index, or None when outside the curve."""
    if 1 <= index <= len(SPACED_INTERVALS_DAYS):
        return SPACED_INTERVALS_DAYS[index - 1]
    return None


def create_schedule(
    title: str,
    base_instant: datetime | None = None,
) -> tuple[Note, list[Repetition]]:
    """
    Create a note and all of its scheduled repetitions.

    The caller is responsible for rejecting empty titles.

    Args:
        title: Note title (surrounding whitespace is stripped)
        base_instant: Creation instant, defaults to now

    Returns:
        Tuple of (note, six pending repetitions with indices 1..6)
    """
    created_at = base_instant if base_instant is not None else local_now()
    note = Note(
        id=generate_id("note"),
        title=title.strip(),
        created_at=created_at,
    )

    repetitions = [
        Repetition(
            id=generate_id("rep"),
            note_id=note.id,
            due_date=add_days(created_at, days),
            index=position,
            status=RepetitionStatus.PENDING,
            reviewed_at=None,
        )
        for position, days in enumerate(SPACED_INTERVALS_DAYS, start=1)
    ]

    return note, repetitions


def create_empty_document() -> Document:
    """Return a document with no notes and no repetitions."""
    return Document.empty()
