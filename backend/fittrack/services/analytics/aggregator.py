"""
Stats Aggregator - Derived statistics snapshot for a user.

Orchestrates:
- Workout totals and best historical streak
- Average daily calories (per-day sums, averaged over logged days)
- Monthly workout rollups over a trailing window
- Most frequently performed exercises

Stateless: every call reads the store and recomputes. Store failures
propagate to the caller as RetrievalError.
"""
from collections import defaultdict
from datetime import date
from typing import Callable, Dict, List, Optional

from fittrack.core.config import settings
from fittrack.core.logging import get_logger, log_timing
from fittrack.services.analytics.bucketing import (
    Granularity,
    group_by_bucket,
    month_key,
    months_before,
    utc_today,
)
from fittrack.services.analytics.errors import RetrievalError
from fittrack.services.analytics.store import EventStore
from fittrack.services.analytics.streak import longest_streak
from fittrack.services.analytics.types import (
    DailyBucket,
    DateRange,
    EventSource,
    ExerciseEntry,
    ExerciseSummary,
    MonthlyRollup,
    StatsSnapshot,
    WorkoutRow,
)

logger = get_logger(__name__)


class StatsAggregator:
    """
    Computes a StatsSnapshot from a user's stored events.

    Usage:
        aggregator = StatsAggregator(SqlEventStore(db))
        snapshot = await aggregator.get_stats(user_id)
    """

    def __init__(
        self,
        store: EventStore,
        clock: Callable[[], date] = utc_today,
        rollup_months: Optional[int] = None,
        top_exercises_limit: Optional[int] = None
    ):
        self.store = store
        self.clock = clock
        self.rollup_months = rollup_months if rollup_months is not None else settings.STATS_ROLLUP_MONTHS
        self.top_exercises_limit = (
            top_exercises_limit if top_exercises_limit is not None else settings.STATS_TOP_EXERCISES
        )

    async def get_stats(self, user_id: int) -> StatsSnapshot:
        """
        Compute the full statistics snapshot.

        Args:
            user_id: Owner of the events

        Returns:
            StatsSnapshot, zero-filled when the user has no events

        Raises:
            RetrievalError: If the event store is unreachable or a query fails
        """
        today = self.clock()
        rollup_range = DateRange(start=months_before(today, self.rollup_months), end=today)

        with log_timing(logger, "Computed user stats", user_id=user_id):
            try:
                total_workouts = await self.store.count_workouts(user_id)
                workout_days = await self.store.fetch_workout_days(user_id)
                nutrition_days = await self.store.fetch_bucketed_aggregates(
                    user_id, EventSource.NUTRITION
                )
                rollup_rows = await self.store.fetch_workout_rows(user_id, rollup_range)
                exercise_entries = await self.store.fetch_exercise_entries(user_id)
            except RetrievalError:
                raise
            except Exception as e:
                raise RetrievalError(f"Failed to load events for stats: {e}") from e

            snapshot = StatsSnapshot(
                total_workouts=total_workouts,
                streak_days=longest_streak(workout_days),
                avg_daily_calories=average_daily_calories(nutrition_days),
                monthly_rollups=monthly_rollups(rollup_rows),
                top_exercises=top_exercises(exercise_entries, self.top_exercises_limit),
                as_of=today,
            )

        logger.info(
            "User stats computed",
            user_id=user_id,
            total_workouts=snapshot.total_workouts,
            streak=snapshot.streak_days,
        )

        return snapshot


# ========================================
# Pure computations
# ========================================

def average_daily_calories(buckets: Dict[date, DailyBucket]) -> float:
    """
    Mean of per-day calorie sums.

    Only days present in `buckets` count towards the denominator, so days
    without any food log never drag the average down.
    """
    if not buckets:
        return 0.0
    total = sum(b.calories for b in buckets.values())
    return round(total / len(buckets), 2)


def monthly_rollups(rows: List[WorkoutRow]) -> List[MonthlyRollup]:
    """Group workouts by calendar month, most recent month first."""
    groups = group_by_bucket(rows, lambda r: r.date, Granularity.MONTH)

    rollups = [
        MonthlyRollup(
            month=month_key(month),
            active_days=len({r.date for r in month_rows}),
            total_workouts=len(month_rows),
            total_duration=sum(r.duration_minutes for r in month_rows),
        )
        for month, month_rows in groups.items()
    ]
    rollups.reverse()
    return rollups


def top_exercises(entries: List[ExerciseEntry], limit: int = 5) -> List[ExerciseSummary]:
    """
    Most performed exercises with their average recorded weight.

    An entry without a weight counts as 0 in the average rather than
    being left out. Ties on count are ordered by name.
    """
    counts: Dict[str, int] = defaultdict(int)
    weight_totals: Dict[str, float] = defaultdict(float)

    for entry in entries:
        counts[entry.exercise_name] += 1
        weight_totals[entry.exercise_name] += entry.weight or 0.0

    ranked = sorted(counts, key=lambda name: (-counts[name], name))

    return [
        ExerciseSummary(
            exercise_name=name,
            times_performed=counts[name],
            avg_weight=round(weight_totals[name] / counts[name], 2),
        )
        for name in ranked[:limit]
    ]
