"""
Progress Service - Range-filtered workout and nutrition chart data.

Never fails: any retrieval problem yields an empty, zero-valued series
so that charts still render.
"""
from datetime import date
from typing import Callable, Dict, Optional

from fittrack.core.logging import get_logger, log_timing
from fittrack.services.analytics.aligner import align, build_axis, resolve_range
from fittrack.services.analytics.bucketing import utc_today
from fittrack.services.analytics.store import EventStore
from fittrack.services.analytics.types import (
    DailyBucket,
    EventSource,
    NutritionSeries,
    ProgressMetrics,
    ProgressSeries,
    WorkoutSeries,
)

logger = get_logger(__name__)

WORKOUT_FIELDS = ("duration", "count")
NUTRITION_FIELDS = ("calories", "protein", "carbs", "fats")


class ProgressService:
    """
    Builds ProgressSeries for a user and a range keyword.

    Usage:
        service = ProgressService(SqlEventStore(db))
        series = await service.get_progress(user_id, "week")
    """

    def __init__(self, store: EventStore, clock: Callable[[], date] = utc_today):
        self.store = store
        self.clock = clock

    async def get_progress(self, user_id: int, range_name: Optional[str] = None) -> ProgressSeries:
        """
        Aligned progress series for the range.

        Args:
            user_id: Owner of the events
            range_name: week, month or year. Anything else means month.

        Returns:
            ProgressSeries. Empty with zero metrics on any store error.
        """
        key, date_range = resolve_range(range_name, self.clock())

        try:
            with log_timing(logger, "Computed progress series", user_id=user_id, range=key):
                workouts = await self.store.fetch_bucketed_aggregates(
                    user_id, EventSource.WORKOUT, date_range
                )
                nutrition = await self.store.fetch_bucketed_aggregates(
                    user_id, EventSource.NUTRITION, date_range
                )
        except Exception as e:
            logger.warning(
                "Progress retrieval failed, returning empty series",
                user_id=user_id,
                range=key,
                error=str(e),
            )
            return ProgressSeries.empty(key)

        axis = build_axis(workouts, nutrition, date_range=date_range)
        labels = [d.isoformat() for d in axis]
        workout_values = align(axis, workouts, WORKOUT_FIELDS)
        nutrition_values = align(axis, nutrition, NUTRITION_FIELDS)

        return ProgressSeries(
            range=key,
            workouts=WorkoutSeries(
                dates=labels,
                durations=workout_values["duration"],
                counts=workout_values["count"],
            ),
            nutrition=NutritionSeries(
                dates=list(labels),
                calories=nutrition_values["calories"],
                protein=nutrition_values["protein"],
                carbs=nutrition_values["carbs"],
                fats=nutrition_values["fats"],
            ),
            metrics=progress_metrics(workouts, nutrition),
        )


def progress_metrics(
    workouts: Dict[date, DailyBucket],
    nutrition: Dict[date, DailyBucket]
) -> ProgressMetrics:
    """Totals and per-active-day averages of the two sources."""
    total_duration = sum(b.duration for b in workouts.values())
    total_calories = sum(b.calories for b in nutrition.values())

    return ProgressMetrics(
        total_workouts=sum(b.count for b in workouts.values()),
        avg_duration=round(total_duration / len(workouts), 2) if workouts else 0.0,
        total_calories=round(total_calories, 2),
        avg_calories=round(total_calories / len(nutrition), 2) if nutrition else 0.0,
    )
