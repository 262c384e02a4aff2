"""
Reminder Schemas.
"""

from datetime import date

from pydantic import Field

from spaced_notes.schemas.note import _DocumentBase


class ReminderSettings(_DocumentBase):
    """Persisted daily reminder preferences. Stored with camelCase keys."""

    enabled: bool = Field(default=False, description="Whether the reminder is active")
    hour: int = Field(default=12, ge=0, le=23, description="Local hour of the reminder")
    minute: int = Field(default=0, ge=0, le=59, description="Minute of the reminder")
    last_notified_date: date | None = Field(
        default=None,
        description="Day the last reminder was sent",
    )
