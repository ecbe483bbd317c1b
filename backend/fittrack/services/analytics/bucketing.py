"""
Date Bucketer - Normalize event timestamps to calendar buckets.

All truncation happens in UTC, the reference timezone of the event
store, so that pure dates (workouts) and full timestamps (food logs)
land on the same calendar day regardless of their time component.
"""
import calendar
from collections import defaultdict
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, TypeVar, Union

REFERENCE_TZ = timezone.utc

Timestamp = Union[date, datetime, str]
T = TypeVar("T")


class Granularity(str, Enum):
    DAY = "day"
    MONTH = "month"


def to_calendar_day(value: Timestamp) -> date:
    """
    Truncate a date, datetime or ISO-8601 string to its UTC calendar day.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, str):
        value = _parse_iso(value)

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(REFERENCE_TZ)
        return value.date()

    if isinstance(value, date):
        return value

    raise TypeError(f"Cannot bucket value of type {type(value).__name__}")


def truncate(value: Timestamp, granularity: Granularity = Granularity.DAY) -> date:
    """Truncate a timestamp to the first day of its bucket."""
    day = to_calendar_day(value)
    if granularity == Granularity.MONTH:
        return day.replace(day=1)
    return day


def bucket_days(
    values: Iterable[Timestamp],
    granularity: Granularity = Granularity.DAY
) -> List[date]:
    """
    Distinct bucket keys of the given timestamps, ascending.

    Empty input gives an empty list.
    """
    return sorted({truncate(v, granularity) for v in values})


def group_by_bucket(
    items: Iterable[T],
    timestamp_of: Callable[[T], Timestamp],
    granularity: Granularity = Granularity.DAY
) -> Dict[date, List[T]]:
    """
    Group items by the bucket of their timestamp.

    Keys are inserted in ascending order.
    """
    groups: Dict[date, List[T]] = defaultdict(list)
    for item in items:
        groups[truncate(timestamp_of(item), granularity)].append(item)
    return {key: groups[key] for key in sorted(groups)}


def month_key(day: date) -> str:
    """YYYY-MM label of a calendar month."""
    return f"{day.year:04d}-{day.month:02d}"


def _parse_iso(value: str) -> Union[date, datetime]:
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    # fromisoformat rejects a trailing Z before Python 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def utc_today() -> date:
    """Current calendar day in the reference timezone."""
    return datetime.now(REFERENCE_TZ).date()


def months_before(day: date, months: int) -> date:
    """Same day-of-month `months` calendar months earlier, clamped to month end."""
    year, month = divmod(day.year * 12 + (day.month - 1) - months, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
