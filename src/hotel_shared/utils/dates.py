"""Date arithmetic used for display: nights, deadlines and expiry checks."""

import math
from datetime import UTC, date, datetime, time, timedelta

DEFAULT_CHECK_OUT_TIME = time(11, 0)
DEFAULT_CHECK_IN_TIME = time(15, 0)

# Days before check-in after which changes or cancellations incur a fee
CHANGE_DEADLINE_DAYS = 2


def nights_between(check_in: date, check_out: date) -> int:
    """Number of nights between two dates, rounded up and never negative."""
    seconds = abs((check_out - check_in).total_seconds())
    return math.ceil(seconds / 86400)


def as_aware(value: datetime) -> datetime:
    """Return an aware datetime, reading naive values as server-local time.

    The backend serialises LocalDateTime without an offset.
    """
    if value.tzinfo is None:
        return value.astimezone()
    return value


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def parse_time(value: str | None, default: time) -> time:
    """Parse "HH:MM" (or "HH:MM:SS"), falling back to default."""
    if not value:
        return default
    parts = value.split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        return time(hours, minutes)
    except ValueError:
        return default


def checkout_datetime(check_out_date: date, check_out_time: str | None = None) -> datetime:
    """Local aware datetime at which a stay ends."""
    moment = datetime.combine(check_out_date, parse_time(check_out_time, DEFAULT_CHECK_OUT_TIME))
    return as_aware(moment)


def change_deadline(check_in_date: date) -> datetime:
    """Start of the day CHANGE_DEADLINE_DAYS before check-in, local time."""
    deadline = datetime.combine(check_in_date - timedelta(days=CHANGE_DEADLINE_DAYS), time.min)
    return as_aware(deadline)


def parse_iso_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD form value; blank or malformed input yields None."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None
