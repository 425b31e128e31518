"""
Time bucketing helpers.

All bucketing happens in the time zone of the reference time ``now``. Naive
timestamps are taken to already be in that zone; when ``now`` is naive,
aware timestamps are converted to UTC and compared as naive values.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, List, Optional, Tuple

from .exceptions import MalformedTimestamp


def parse_timestamp(value: Any, transaction_id: Optional[str] = None) -> datetime:
    """
    Coerce a created_at value into a datetime.

    Accepts datetime, date (midnight) and ISO-8601 strings, including a
    trailing ``Z`` for UTC.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        if text:
            try:
                return datetime.fromisoformat(text)
            except ValueError:
                pass
    raise MalformedTimestamp(
        f"Cannot parse created_at: {value!r}",
        transaction_id=transaction_id,
        value=value,
    )


def align_to(ts: datetime, now: datetime) -> datetime:
    """Express ts in the same time zone convention as now"""
    if now.tzinfo is None:
        if ts.tzinfo is None:
            return ts
        return ts.astimezone(timezone.utc).replace(tzinfo=None)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=now.tzinfo)
    return ts.astimezone(now.tzinfo)


def localize(value: Any, now: datetime, transaction_id: Optional[str] = None) -> datetime:
    """Parse a created_at value and align it with now"""
    return align_to(parse_timestamp(value, transaction_id), now)


def calendar_day(value: Any, now: datetime, transaction_id: Optional[str] = None) -> date:
    """Truncate a created_at value to its calendar day in now's time zone"""
    return localize(value, now, transaction_id).date()


def trailing_days(now: datetime, days: int) -> List[date]:
    """Consecutive calendar days ending on now's day, oldest first"""
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")
    today = now.date()
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


@dataclass(frozen=True)
class TimeWindow:
    """Interval closed at start, closed or open at end"""
    start: datetime
    end: datetime
    include_end: bool = True

    def contains(self, ts: datetime) -> bool:
        if ts < self.start:
            return False
        if self.include_end:
            return ts <= self.end
        return ts < self.end


def comparison_windows(now: datetime, period_days: int = 7) -> Tuple[TimeWindow, TimeWindow]:
    """
    Current and previous trailing windows.

    current is [now - period, now] and previous is [now - 2*period, now - period),
    so a timestamp exactly on the shared boundary belongs to current only.
    """
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")
    boundary = now - timedelta(days=period_days)
    current = TimeWindow(start=boundary, end=now, include_end=True)
    previous = TimeWindow(
        start=boundary - timedelta(days=period_days),
        end=boundary,
        include_end=False,
    )
    return current, previous
