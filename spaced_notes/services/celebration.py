"""
Celebration Markers.

Remembers, per calendar day, whether the "all reviews done" celebration was
already shown, so it appears at most once a day.
"""

from spaced_notes.core.dates import DayLike, calendar_day
from spaced_notes.core.logging import get_logger
from spaced_notes.repositories.base import KeyValueStore
from spaced_notes.schemas.note import ScheduledReview

logger = get_logger(__name__)

DEFAULT_CONGRATS_PREFIX = "spaced-notes-congrats:"
_SHOWN = b"1"


class CelebrationService:
    """Per-day celebration markers kept in the key-value store."""

    def __init__(self, store: KeyValueStore, prefix: str = DEFAULT_CONGRATS_PREFIX) -> None:
        self.store = store
        self.prefix = prefix

    def key_for(self, day: DayLike) -> str:
        return f"{self.prefix}{calendar_day(day).isoformat()}"

    def has_shown_for(self, day: DayLike) -> bool:
        return self.store.get(self.key_for(day)) == _SHOWN

    def mark_shown(self, day: DayLike) -> None:
        self.store.set(self.key_for(day), _SHOWN)

    def celebrate_if_complete(self, items: list[ScheduledReview], day: DayLike) -> bool:
        """
        Decide whether to celebrate the given day list.

        True only when the list is non-empty, every repetition in it is done,
        and the celebration has not been shown for this day yet. A True
        result marks the day as shown.
        """
        if not items:
            return False
        if not all(item.repetition.is_done for item in items):
            return False
        if self.has_shown_for(day):
            return False

        self.mark_shown(day)
        logger.info("Day complete", extra={"day": calendar_day(day).isoformat(), "reviews": len(items)})
        return True
