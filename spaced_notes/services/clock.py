"""
Effective Today.

"Today" as the application sees it: the real local date, unless a fake
date was set for testing how the schedule looks on another day.
"""

from datetime import date

from spaced_notes.core.dates import DayLike, calendar_day, local_now, parse_iso
from spaced_notes.core.logging import get_logger
from spaced_notes.repositories.base import KeyValueStore

logger = get_logger(__name__)

DEFAULT_FAKE_TODAY_KEY = "sn_fakeToday"


class ClockService:
    """Fake-today override kept in the key-value store."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_FAKE_TODAY_KEY) -> None:
        self.store = store
        self.key = key

    def fake_today(self) -> date | None:
        """The stored fake date. Unreadable values count as unset."""
        raw = self.store.get(self.key)
        if raw is None:
            return None
        try:
            return calendar_day(parse_iso(raw.decode("utf-8")))
        except (UnicodeDecodeError, ValueError):
            logger.debug("Ignoring unreadable fake today", extra={"key": self.key})
            return None

    def set_fake_today(self, day: DayLike) -> date:
        fake = calendar_day(day)
        self.store.set(self.key, fake.isoformat().encode("utf-8"))
        logger.info("Fake today set", extra={"day": fake.isoformat()})
        return fake

    def clear_fake_today(self) -> None:
        self.store.delete(self.key)
        logger.info("Fake today cleared")

    def effective_today(self) -> date:
        """The fake date when set, otherwise the real local date."""
        fake = self.fake_today()
        return fake if fake is not None else local_now().date()

    def reset_all_data(self) -> None:
        """Remove every key: the document, markers, reminder settings and fake date."""
        self.store.clear()
        logger.warning("All data cleared")
