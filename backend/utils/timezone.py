"""
Timezone Utility Module
All stored timestamps are UTC. MongoDB keeps millisecond precision, so clock
values are truncated to the millisecond before they are written.
"""
from datetime import datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

UTC_TZ = ZoneInfo("UTC")

Clock = Callable[[], datetime]


def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if naive
        return dt.replace(tzinfo=UTC_TZ)
    return dt.astimezone(UTC_TZ)


def truncate_to_millis(dt: datetime) -> datetime:
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def now_utc() -> datetime:
    """Get current datetime in UTC, at BSON precision."""
    return truncate_to_millis(datetime.now(UTC_TZ))


def minutes_before(dt: datetime, minutes: int) -> datetime:
    return dt - timedelta(minutes=minutes)


def fixed_clock(dt: datetime) -> Clock:
    """Clock that always returns `dt` (UTC, millisecond precision)."""
    value = truncate_to_millis(to_utc(dt))
    return lambda: value
