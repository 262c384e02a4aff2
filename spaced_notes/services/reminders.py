"""
Daily Reminder.

A single daily reminder: when the current time is within a window around
the configured time and no reminder was sent yet today, a message with the
number of reviews due today is produced. Delivery is up to the caller,
which then records it with mark_sent().
"""

from datetime import datetime, time, timedelta

from pydantic import ValidationError as PydanticValidationError

from spaced_notes.core.dates import DayLike, calendar_day, to_local
from spaced_notes.core.logging import get_logger
from spaced_notes.repositories.base import KeyValueStore
from spaced_notes.schemas.reminder import ReminderSettings
from spaced_notes.services.note import NoteService

logger = get_logger(__name__)

DEFAULT_REMINDER_KEY = "spaced-notes-reminder"
DEFAULT_WINDOW_MINUTES = 30


def reminder_message(pending_count: int) -> str:
    if pending_count == 1:
        return "You have 1 note to review today."
    if pending_count > 1:
        return f"You have {pending_count} notes to review today."
    return "Time to review your notes."


class ReminderService:
    """Reminder settings and the decision of when to remind."""

    def __init__(
        self,
        store: KeyValueStore,
        note_service: NoteService,
        key: str = DEFAULT_REMINDER_KEY,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
    ) -> None:
        self.store = store
        self.note_service = note_service
        self.key = key
        self.window = timedelta(minutes=window_minutes)

    def load_settings(self) -> ReminderSettings:
        """Stored settings, or the defaults when absent or invalid."""
        raw = self.store.get(self.key)
        if raw is None:
            return ReminderSettings()
        try:
            return ReminderSettings.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Invalid reminder settings, using defaults", extra={"key": self.key})
            return ReminderSettings()

    def save_settings(self, settings: ReminderSettings) -> None:
        self.store.set(self.key, settings.model_dump_json(by_alias=True).encode("utf-8"))

    def configure(
        self,
        enabled: bool | None = None,
        hour: int | None = None,
        minute: int | None = None,
    ) -> ReminderSettings:
        """
        Change some settings and persist them.

        Raises:
            pydantic.ValidationError: If hour or minute is out of range
        """
        current = self.load_settings()
        changes = {
            name: value
            for name, value in (("enabled", enabled), ("hour", hour), ("minute", minute))
            if value is not None
        }
        updated = ReminderSettings.model_validate({**current.model_dump(), **changes})
        self.save_settings(updated)
        return updated

    def due_reminder(self, now: datetime, today: DayLike | None = None) -> str | None:
        """
        Return the reminder message if one should be sent now, else None.

        Args:
            now: Current instant, compared against the configured time
            today: Day whose pending reviews are counted, defaults to now's day
        """
        settings = self.load_settings()
        if not settings.enabled:
            return None

        local = to_local(now)
        if settings.last_notified_date == local.date():
            return None

        target = datetime.combine(
            local.date(),
            time(hour=settings.hour, minute=settings.minute),
            tzinfo=local.tzinfo,
        )
        if abs(local - target) > self.window:
            return None

        pending = self.note_service.count_pending_due_on(today if today is not None else local)
        return reminder_message(pending)

    def mark_sent(self, day: DayLike) -> None:
        """Record that today's reminder went out."""
        settings = self.load_settings()
        settings.last_notified_date = calendar_day(day)
        self.save_settings(settings)
        logger.info("Reminder sent", extra={"day": settings.last_notified_date.isoformat()})
