"""
Reschedule Engine.

When the user moves one repetition to a new date, the note's later pending
repetitions follow it so that their spacing on the interval curve is kept.
"""

from datetime import date, datetime

from spaced_notes.core.dates import add_days, at_hour
from spaced_notes.schemas.note import Document
from spaced_notes.services.scheduler import interval_for_index

DEFAULT_RESCHEDULE_HOUR = 12


def reschedule_from_repetition(
    document: Document,
    note_id: str,
    from_index: int,
    new_base_date: date | datetime,
    hour: int = DEFAULT_RESCHEDULE_HOUR,
) -> Document:
    """
    Shift a note's pending repetitions from from_index onwards.

    Repetition from_index lands on new_base_date; every pending repetition
    with a higher index lands curve[index-1] - curve[from_index-1] days
    after it. Due times are pinned to the given local hour.

    Repetitions below from_index and repetitions already done are left
    alone. Indices outside the curve are skipped. The document is modified
    in place and returned.
    """
    repetitions = document.repetitions_for(note_id)
    if not repetitions:
        return document

    base_offset = interval_for_index(from_index)
    if base_offset is None:
        return document

    base_date = at_hour(new_base_date, hour)

    for repetition in repetitions:
        if repetition.index < from_index:
            continue
        if not repetition.is_pending:
            continue

        target_offset = interval_for_index(repetition.index)
        if target_offset is None:
            continue

        repetition.due_date = add_days(base_date, target_offset - base_offset)

    return document
