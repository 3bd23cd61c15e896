"""UTC helpers shared by entitlement and usage calculations."""

from datetime import datetime, timezone
from typing import Optional, Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def current_period(now: Optional[datetime] = None) -> Tuple[int, int]:
    """Return the (month, year) usage period containing ``now``."""
    now = as_utc(now) or utc_now()
    return now.month, now.year


def month_bounds(month: int, year: int) -> Tuple[datetime, datetime]:
    """Half-open [start, end) UTC bounds of a calendar month."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end
