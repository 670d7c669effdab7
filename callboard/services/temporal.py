"""
Temporal bucketing for call and funnel event timestamps.

Assigns a timestamp to a UTC calendar day, to a wall-clock minute of the day,
and to a day index relative to the start of a report range. The report range
itself is an immutable DateRange value built by the caller.

Conventions:
    - Naive datetimes are treated as UTC (the store keeps UTC in
      ``timestamp without time zone`` columns).
    - Day keys are always UTC dates.
    - Minutes from midnight are read in the report timezone, because shift
      schemas are written in local wall-clock minutes.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from callboard.services.errors import InvalidRangeError


SECONDS_PER_DAY: int = 86400

MINUTES_PER_DAY: int = 1440


def as_utc(ts: datetime) -> datetime:
    """Return ``ts`` as an aware UTC datetime (naive input is taken as UTC)."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive report window ``[start, end]``.

    Both bounds are aware datetimes. The value is never mutated; callers that
    need the end of a day build a new range with for_days().

    Raises:
        InvalidRangeError: If start is after end.
    """
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, 'start', as_utc(self.start))
        object.__setattr__(self, 'end', as_utc(self.end))
        if self.start > self.end:
            raise InvalidRangeError(
                f"Range start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def for_days(
        cls,
        from_date: date,
        to_date: date,
        tz: Optional[tzinfo] = None
    ) -> "DateRange":
        """
        Build the range covering whole days ``from_date`` .. ``to_date``.

        The start is midnight of from_date and the end is the last microsecond
        of to_date, both in ``tz`` (UTC when omitted).
        """
        tz = tz or timezone.utc
        start = datetime.combine(from_date, time.min, tzinfo=tz)
        end = datetime.combine(to_date, time.max, tzinfo=tz)
        return cls(start=start, end=end)

    def contains(self, ts: datetime) -> bool:
        return self.start <= as_utc(ts) <= self.end


def day_key(ts: datetime) -> date:
    """UTC calendar date of a timestamp."""
    return as_utc(ts).date()


def minutes_from_midnight(ts: datetime, tz: Optional[tzinfo] = None) -> int:
    """
    Wall-clock minutes since midnight, in [0, 1440).

    Seconds are truncated: 07:59:59 is minute 479.
    """
    local = as_utc(ts).astimezone(tz or timezone.utc)
    return local.hour * 60 + local.minute


def relative_day_index(
    ts: datetime,
    range_start: datetime,
    absolute: bool = False
) -> int:
    """
    Whole days elapsed between ``range_start`` and ``ts``.

    Computed as floor((ts - range_start) / 86400 s). The result can be negative
    or larger than the range; callers discard indices they cannot use.

    Args:
        ts: Timestamp to place.
        range_start: Start of the report range (day index 0).
        absolute: Floor the absolute difference instead, so a timestamp just
            before range_start lands on index 0 rather than -1.
    """
    seconds = (as_utc(ts) - as_utc(range_start)).total_seconds()
    if absolute:
        seconds = abs(seconds)
    return math.floor(seconds / SECONDS_PER_DAY)


def days_in_range(from_date: date, to_date: date) -> int:
    """Inclusive number of calendar days between two dates, regardless of order."""
    return abs((to_date - from_date).days) + 1
