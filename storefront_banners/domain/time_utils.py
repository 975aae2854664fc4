"""Clock-time and timestamp helpers for banner schedules."""

import re
from datetime import UTC, date, datetime, time

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def is_valid_time(value: str) -> bool:
    """Check that a string is a 24-hour HH:mm clock time."""
    match = _TIME_RE.match(value.strip())
    if not match:
        return False
    hours, minutes = int(match.group(1)), int(match.group(2))
    return 0 <= hours < 24 and 0 <= minutes < 60


def time_to_minutes(value: str) -> int:
    """Convert an HH:mm clock time to minutes since midnight.

    Raises ValueError for anything that is not a valid HH:mm time.
    """
    if not is_valid_time(value):
        raise ValueError(f"Invalid time of day: {value!r}")
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total: int) -> str:
    """Format minutes since midnight as HH:mm."""
    hours, minutes = divmod(total, 60)
    return f"{hours:02d}:{minutes:02d}"


def combine_date_time(day: date, clock: str) -> datetime:
    """Build a UTC timestamp from a calendar date and an HH:mm clock time."""
    hours, minutes = divmod(time_to_minutes(clock), 60)
    return datetime.combine(day, time(hours, minutes), tzinfo=UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC). Naive values are treated as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
