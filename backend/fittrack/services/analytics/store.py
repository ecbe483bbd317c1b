"""
Event Store - Read access to workout and food logs.

The analytics core only reads: every write goes through the logging
endpoints. Store failures surface as RetrievalError so that callers can
tell them apart from an empty history.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.logging import get_logger
from fittrack.models.food import FoodLog
from fittrack.models.workout import WorkoutExercise, WorkoutLog
from fittrack.services.analytics.bucketing import group_by_bucket, to_calendar_day
from fittrack.services.analytics.errors import RetrievalError
from fittrack.services.analytics.types import (
    DailyBucket,
    DateRange,
    EventSource,
    ExerciseEntry,
    NutritionRow,
    WorkoutRow,
)

logger = get_logger(__name__)


class EventStore(ABC):
    """Abstract read contract over a user's logged events."""

    @abstractmethod
    async def count_workouts(self, user_id: int) -> int:
        """Number of workouts ever logged."""
        pass

    @abstractmethod
    async def fetch_workout_days(self, user_id: int) -> List[date]:
        """Distinct workout days, ascending, unbounded."""
        pass

    @abstractmethod
    async def fetch_workout_rows(
        self,
        user_id: int,
        date_range: Optional[DateRange] = None
    ) -> List[WorkoutRow]:
        """Workout rows, optionally restricted to an inclusive date range."""
        pass

    @abstractmethod
    async def fetch_nutrition_rows(
        self,
        user_id: int,
        date_range: Optional[DateRange] = None
    ) -> List[NutritionRow]:
        """Food log rows whose UTC day falls in the inclusive date range."""
        pass

    @abstractmethod
    async def fetch_exercise_entries(self, user_id: int) -> List[ExerciseEntry]:
        """Every exercise entry across all of the user's workouts."""
        pass

    async def fetch_bucketed_aggregates(
        self,
        user_id: int,
        source: EventSource,
        date_range: Optional[DateRange] = None
    ) -> Dict[date, DailyBucket]:
        """
        Per-day aggregates of one source.

        Only days with at least one event are present, ascending.

        Args:
            user_id: Owner of the events
            source: Workout or nutrition
            date_range: Inclusive range, None for the full history

        Returns:
            Dict of calendar day -> DailyBucket
        """
        buckets: Dict[date, DailyBucket] = {}

        if source == EventSource.WORKOUT:
            rows = await self.fetch_workout_rows(user_id, date_range)
            for day, day_rows in group_by_bucket(rows, lambda r: r.date).items():
                buckets[day] = DailyBucket(
                    count=len(day_rows),
                    duration=sum(r.duration_minutes for r in day_rows),
                )
        else:
            rows = await self.fetch_nutrition_rows(user_id, date_range)
            for day, day_rows in group_by_bucket(rows, lambda r: r.logged_at).items():
                buckets[day] = DailyBucket(
                    count=len(day_rows),
                    calories=sum(r.calories for r in day_rows),
                    protein=sum(r.protein_g for r in day_rows),
                    carbs=sum(r.carbs_g for r in day_rows),
                    fats=sum(r.fats_g for r in day_rows),
                )

        if date_range is not None:
            buckets = {d: b for d, b in buckets.items() if date_range.contains(d)}

        return buckets


class SqlEventStore(EventStore):
    """
    Event store backed by the relational database.

    Usage:
        store = SqlEventStore(db)
        days = await store.fetch_workout_days(user_id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_workouts(self, user_id: int) -> int:
        stmt = select(func.count(WorkoutLog.id)).where(WorkoutLog.user_id == user_id)
        result = await self._execute(stmt, "count_workouts", user_id)
        return int(result.scalar_one() or 0)

    async def fetch_workout_days(self, user_id: int) -> List[date]:
        stmt = (
            select(WorkoutLog.date)
            .where(WorkoutLog.user_id == user_id)
            .distinct()
            .order_by(WorkoutLog.date)
        )
        result = await self._execute(stmt, "fetch_workout_days", user_id)
        return [to_calendar_day(d) for d in result.scalars().all()]

    async def fetch_workout_rows(
        self,
        user_id: int,
        date_range: Optional[DateRange] = None
    ) -> List[WorkoutRow]:
        stmt = select(WorkoutLog.date, WorkoutLog.duration).where(
            WorkoutLog.user_id == user_id
        )
        if date_range is not None:
            stmt = stmt.where(
                WorkoutLog.date >= date_range.start,
                WorkoutLog.date <= date_range.end,
            )
        stmt = stmt.order_by(WorkoutLog.date)

        result = await self._execute(stmt, "fetch_workout_rows", user_id)
        return [
            WorkoutRow(date=to_calendar_day(row.date), duration_minutes=int(row.duration or 0))
            for row in result.all()
        ]

    async def fetch_nutrition_rows(
        self,
        user_id: int,
        date_range: Optional[DateRange] = None
    ) -> List[NutritionRow]:
        stmt = select(
            FoodLog.logged_at,
            FoodLog.calories,
            FoodLog.protein,
            FoodLog.carbs,
            FoodLog.fats,
        ).where(FoodLog.user_id == user_id)
        if date_range is not None:
            lower, upper = _utc_bounds(date_range)
            stmt = stmt.where(FoodLog.logged_at >= lower, FoodLog.logged_at < upper)
        stmt = stmt.order_by(FoodLog.logged_at)

        result = await self._execute(stmt, "fetch_nutrition_rows", user_id)
        return [
            NutritionRow(
                logged_at=row.logged_at,
                calories=float(row.calories or 0),
                protein_g=float(row.protein or 0),
                carbs_g=float(row.carbs or 0),
                fats_g=float(row.fats or 0),
            )
            for row in result.all()
        ]

    async def fetch_exercise_entries(self, user_id: int) -> List[ExerciseEntry]:
        stmt = (
            select(WorkoutExercise.exercise_name, WorkoutExercise.weight)
            .join(WorkoutLog, WorkoutExercise.workout_id == WorkoutLog.id)
            .where(WorkoutLog.user_id == user_id)
            .order_by(WorkoutExercise.id)
        )
        result = await self._execute(stmt, "fetch_exercise_entries", user_id)
        return [
            ExerciseEntry(
                exercise_name=row.exercise_name,
                weight=float(row.weight) if row.weight is not None else None,
            )
            for row in result.all()
        ]

    async def _execute(self, stmt, operation: str, user_id: int):
        """Run a read statement, translating driver failures to RetrievalError."""
        try:
            return await self.db.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Event store query failed",
                operation=operation,
                user_id=user_id,
                error=str(e)
            )
            raise RetrievalError(f"Event store query failed: {operation}", operation) from e


def _utc_bounds(date_range: DateRange) -> tuple[datetime, datetime]:
    """Half-open UTC datetime bounds covering the inclusive date range."""
    lower = datetime.combine(date_range.start, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(date_range.end + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return lower, upper
