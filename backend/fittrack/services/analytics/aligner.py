"""
Series Aligner - Put independently sparse per-day series on one date axis.

The axis is the union of days that have data in any source within the
requested range. It is not a dense calendar: days without observations in
either source are absent. A day missing from one source contributes 0 to
every field of that source.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from fittrack.services.analytics.types import DateRange

DEFAULT_RANGE = "month"

RANGE_DAYS: Dict[str, int] = {
    "week": 7,
    "month": 30,
    "year": 365,
}


def normalize_range(range_name: Optional[str]) -> str:
    """Map a range keyword to a known one. Unknown values become the default."""
    key = (range_name or "").strip().lower()
    return key if key in RANGE_DAYS else DEFAULT_RANGE


def resolve_range(range_name: Optional[str], today: date) -> Tuple[str, DateRange]:
    """
    Resolve a range keyword to the N calendar days ending today, inclusive.

    Returns:
        Tuple of (normalized keyword, date range)
    """
    key = normalize_range(range_name)
    days = RANGE_DAYS[key]
    return key, DateRange(start=today - timedelta(days=days - 1), end=today)


def build_axis(
    *sources: Mapping[date, Any],
    date_range: Optional[DateRange] = None
) -> List[date]:
    """Sorted union of the days present in any source, clipped to the range."""
    days = set()
    for source in sources:
        days.update(source.keys())
    if date_range is not None:
        days = {d for d in days if date_range.contains(d)}
    return sorted(days)


def align(
    axis: Sequence[date],
    source: Mapping[date, Any],
    fields: Sequence[str],
    default: Any = 0
) -> Dict[str, List[Any]]:
    """
    Project a per-day source onto the axis.

    Args:
        axis: Shared ascending date axis
        source: Per-day aggregates (objects or mappings exposing `fields`)
        fields: Field names to extract
        default: Value used for days missing from the source

    Returns:
        Dict of field name -> list parallel to the axis
    """
    series: Dict[str, List[Any]] = {name: [] for name in fields}
    for day in axis:
        bucket = source.get(day)
        for name in fields:
            if bucket is None:
                value = default
            elif isinstance(bucket, Mapping):
                value = bucket.get(name, default)
            else:
                value = getattr(bucket, name, default)
            series[name].append(default if value is None else value)
    return series
