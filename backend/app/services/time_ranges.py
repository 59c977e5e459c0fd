"""Civil-calendar (fixed UTC+05:30) day and month ranges.

All ranges are half-open ``[start_utc, end_utc)`` and expressed as aware UTC
datetimes. "Today" and month boundaries are evaluated on the civil calendar,
not the host timezone. There is no DST handling: the offset is a constant.
"""
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

from app.core.clock import Clock
from app.core.config import settings

CIVIL_OFFSET = timedelta(minutes=settings.CIVIL_UTC_OFFSET_MINUTES)


@dataclass(frozen=True)
class TimeRange:
    start_utc: datetime
    end_utc: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start_utc <= instant < self.end_utc


def _civil_now(clock: Clock) -> datetime:
    """Current civil wall time as a naive datetime."""
    return (clock.now().astimezone(timezone.utc) + CIVIL_OFFSET).replace(tzinfo=None)


def _civil_to_utc(civil: datetime) -> datetime:
    return (civil - CIVIL_OFFSET).replace(tzinfo=timezone.utc)


def civil_year_month(clock: Clock) -> tuple[int, int]:
    """(year, month_index0) of the current civil instant; month_index0 is 0=Jan..11=Dec."""
    now = _civil_now(clock)
    return now.year, now.month - 1


def day_range(clock: Clock, offset_days: int = 0) -> TimeRange:
    """Civil day ``offset_days`` away from today (0 = today, -1 = yesterday)."""
    civil_start = datetime.combine(_civil_now(clock).date(), time.min) + timedelta(days=offset_days)
    civil_end = civil_start + timedelta(days=1)
    return TimeRange(_civil_to_utc(civil_start), _civil_to_utc(civil_end))


def month_range(year: int, month_index0: int) -> TimeRange:
    """Civil calendar month. Out-of-range indexes roll into adjacent years."""
    year += month_index0 // 12
    month_index0 %= 12
    civil_start = datetime(year, month_index0 + 1, 1)
    if month_index0 == 11:
        civil_end = datetime(year + 1, 1, 1)
    else:
        civil_end = datetime(year, month_index0 + 2, 1)
    return TimeRange(_civil_to_utc(civil_start), _civil_to_utc(civil_end))


def current_month_range(clock: Clock) -> TimeRange:
    year, month_index0 = civil_year_month(clock)
    return month_range(year, month_index0)


def last_month_range(clock: Clock) -> TimeRange:
    year, month_index0 = civil_year_month(clock)
    month_index0 -= 1
    if month_index0 < 0:
        month_index0 = 11
        year -= 1
    return month_range(year, month_index0)


def covering_range(*ranges: TimeRange) -> TimeRange:
    """Smallest range containing every given range."""
    return TimeRange(
        min(r.start_utc for r in ranges),
        max(r.end_utc for r in ranges),
    )
