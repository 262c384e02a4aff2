"""
Calendar-Day Utilities.

Every "due today", "overdue" and "future" decision in the application goes
through these helpers. Comparisons happen on the local calendar day
(year, month, day); time of day is ignored.

Instants are timezone-aware datetimes in local time. Naive datetimes are
read as local wall-clock time. Plain dates are accepted wherever a day is
expected.
"""

from datetime import date, datetime, time, timedelta

DayLike = date | datetime


def local_now() -> datetime:
    """Return the current instant as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def to_local(value: datetime) -> datetime:
    """Convert an instant to local time. Naive values are assumed local already."""
    return value.astimezone()


def calendar_day(value: DayLike) -> date:
    """Return the local calendar day of an instant or date."""
    if isinstance(value, datetime):
        return to_local(value).date()
    return value


def start_of_day(value: DayLike) -> datetime:
    """Return local midnight (00:00:00.000) of the given day."""
    return datetime.combine(calendar_day(value), time.min).astimezone()


def at_hour(value: DayLike, hour: int) -> datetime:
    """Return the given local day pinned to hour:00:00.000."""
    return datetime.combine(calendar_day(value), time(hour=hour)).astimezone()


def add_days(value: datetime, days: int) -> datetime:
    """
    Move an instant by whole local calendar days, keeping its wall-clock time.

    Across a daylight saving change the result keeps the same local hour, so
    the offset of the returned instant may differ from the input.
    """
    local = to_local(value)
    return datetime.combine(local.date() + timedelta(days=days), local.time()).astimezone()


def is_same_day(a: DayLike, b: DayLike) -> bool:
    """Compare only year, month and day."""
    return calendar_day(a) == calendar_day(b)


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO-8601 string into a local instant.

    Accepts full timestamps (with or without offset, including a trailing
    "Z") and bare dates. Bare dates resolve to local midnight.

    Raises:
        ValueError: If the string is not a valid ISO-8601 date or timestamp
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return to_local(parsed)


def is_due_on_date(due_date: DayLike, target_date: DayLike) -> bool:
    """True iff the due date falls on the same local calendar day as the target."""
    return is_same_day(due_date, target_date)


def is_before_day(a: DayLike, b: DayLike) -> bool:
    """True iff the calendar day of a is strictly earlier than that of b."""
    return calendar_day(a) < calendar_day(b)


def today_start() -> datetime:
    """Return today's local midnight."""
    return start_of_day(local_now())


def difference_in_days(start: DayLike, end: DayLike) -> int:
    """Number of whole calendar days from start to end (negative if end is earlier)."""
    return (calendar_day(end) - calendar_day(start)).days


def format_relative_past(start: DayLike, end: DayLike) -> str:
    """
    Describe how long ago start was, seen from end.

    Examples: "Today", "3 days ago", "2 weeks ago", "4 months ago".
    """
    days = difference_in_days(start, end)

    if days <= 0:
        return "Today"

    if days < 7:
        return f"{days} day{'s' if days > 1 else ''} ago"

    if days < 30:
        weeks = round(days / 7)
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"

    months = round(days / 30)
    return f"{months} month{'s' if months > 1 else ''} ago"
