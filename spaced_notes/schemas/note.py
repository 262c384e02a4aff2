"""
Note Schemas.

Pydantic models for the persisted document. Field names on disk are
camelCase (createdAt, noteId, dueDate, ...); Python code uses snake_case.
The same shape is the live store and the export/import file format.
"""

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from spaced_notes.core.dates import to_local


class _DocumentBase(BaseModel):
    """Base for persisted models: camelCase on disk, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class AttachmentType(str, Enum):
    """Kinds of file a note may carry."""

    IMAGE = "image"
    PDF = "pdf"


class RepetitionStatus(str, Enum):
    """Review state of a single repetition."""

    PENDING = "pending"
    DONE = "done"


class Attachment(_DocumentBase):
    """A single file embedded in a note as a base64 data URL."""

    id: str = Field(description="Attachment unique identifier")
    name: str = Field(description="Original file name", examples=["schema.pdf"])
    type: AttachmentType = Field(description="image or pdf")
    # older exports call this field dataUrl
    content: str = Field(
        validation_alias=AliasChoices("content", "dataUrl"),
        description="Base64 data URL of the file",
    )
    size_bytes: int = Field(ge=0, description="File size in bytes")


class Note(_DocumentBase):
    """A short piece of knowledge to review. Owns at most one attachment."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    created_at: datetime = Field(description="Creation instant")
    archived: bool = Field(default=False, description="Whether the note is archived")
    attachment: Attachment | None = Field(default=None, description="Optional attachment")

    @field_validator("created_at")
    @classmethod
    def created_at_as_local(cls, v: datetime) -> datetime:
        return to_local(v)


class Repetition(_DocumentBase):
    """One scheduled review of a note at a given position on the interval curve."""

    id: str = Field(description="Repetition unique identifier")
    note_id: str = Field(description="Id of the reviewed note")
    due_date: datetime = Field(description="Instant the review is due")
    index: int = Field(description="Position on the interval curve, 1-based")
    status: RepetitionStatus = Field(default=RepetitionStatus.PENDING)
    reviewed_at: datetime | None = Field(default=None, description="When it was marked done")

    # offset-less timestamps are local wall-clock time
    @field_validator("due_date", "reviewed_at")
    @classmethod
    def instants_as_local(cls, v: datetime | None) -> datetime | None:
        return to_local(v) if v is not None else None

    @property
    def is_pending(self) -> bool:
        return self.status == RepetitionStatus.PENDING

    @property
    def is_done(self) -> bool:
        return self.status == RepetitionStatus.DONE


class Document(_DocumentBase):
    """The entire persisted unit: every note and every repetition."""

    notes: list[Note]
    repetitions: list[Repetition]

    @classmethod
    def empty(cls) -> "Document":
        """A document with no notes and no repetitions."""
        return cls(notes=[], repetitions=[])

    def find_note(self, note_id: str) -> Note | None:
        """Return the note with this id, or None."""
        return next((n for n in self.notes if n.id == note_id), None)

    def find_repetition(self, repetition_id: str) -> Repetition | None:
        """Return the repetition with this id, or None."""
        return next((r for r in self.repetitions if r.id == repetition_id), None)

    def repetitions_for(self, note_id: str) -> list[Repetition]:
        """Repetitions of one note, ordered by curve index."""
        return sorted(
            (r for r in self.repetitions if r.note_id == note_id),
            key=lambda r: r.index,
        )


class ScheduledReview(BaseModel):
    """A repetition joined with its note, as shown in day and overdue lists."""

    note: Note
    repetition: Repetition
