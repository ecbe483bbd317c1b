"""
Services module - Application business logic layer.

Modules:
- analytics: Statistics and progress computation over logged events
"""
from fittrack.services.analytics import ProgressService, StatsAggregator

__all__ = [
    "ProgressService",
    "StatsAggregator",
]
