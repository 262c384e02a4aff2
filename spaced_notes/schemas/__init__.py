# Pydantic schemas package
from spaced_notes.schemas.note import (
    Attachment,
    AttachmentType,
    Document,
    Note,
    Repetition,
    RepetitionStatus,
    ScheduledReview,
)
from spaced_notes.schemas.reminder import ReminderSettings

__all__ = [
    "Attachment",
    "AttachmentType",
    "Document",
    "Note",
    "ReminderSettings",
    "Repetition",
    "RepetitionStatus",
    "ScheduledReview",
]
