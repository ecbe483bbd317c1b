"""
Analytics module - Derived statistics over workout and food logs.

This module provides:
- Date bucketing in the UTC reference timezone
- Best historical streak calculation
- Date-axis alignment of sparse per-day series
- Statistics snapshot (fails loud) and progress series (fails soft)
- Event store read contract and its SQL implementation
"""
from fittrack.services.analytics.aggregator import StatsAggregator
from fittrack.services.analytics.errors import RetrievalError
from fittrack.services.analytics.progress import ProgressService
from fittrack.services.analytics.store import EventStore, SqlEventStore
from fittrack.services.analytics.streak import longest_streak
from fittrack.services.analytics.types import (
    DailyBucket,
    DateRange,
    EventSource,
    ProgressSeries,
    StatsSnapshot,
)

__all__ = [
    # Data structures
    "DailyBucket",
    "DateRange",
    "EventSource",
    "ProgressSeries",
    "StatsSnapshot",
    # Store
    "EventStore",
    "SqlEventStore",
    # Services
    "StatsAggregator",
    "ProgressService",
    "longest_streak",
    # Errors
    "RetrievalError",
]
