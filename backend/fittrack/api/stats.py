"""
User statistics and reminder API endpoints.
"""
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user_id, get_event_store, get_existing_user_id
from fittrack.core.database import get_db
from fittrack.core.logging import get_logger
from fittrack.models.food import FoodLog
from fittrack.models.workout import WorkoutLog
from fittrack.services.analytics import RetrievalError, StatsAggregator
from fittrack.services.analytics.store import EventStore

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Response Schemas
# ========================================

class MonthlyStatResponse(BaseModel):
    """Workout rollup for one calendar month."""
    month: str = Field(..., description="YYYY-MM")
    activeDays: int
    totalWorkouts: int
    totalDuration: int


class TopExerciseResponse(BaseModel):
    """Frequently performed exercise."""
    exerciseName: str
    timesPerformed: int
    avgWeight: float


class StatsResponse(BaseModel):
    """User statistics snapshot."""
    totalWorkouts: int
    streak: int
    avgCalories: float
    monthlyStats: list[MonthlyStatResponse]
    topExercises: list[TopExerciseResponse]
    asOf: str | None = None
    lastUpdated: datetime


class RemindersResponse(BaseModel):
    """Most recent activity, for reminder prompts."""
    lastWorkout: date | None = None
    lastNutrition: datetime | None = None


# ========================================
# API Endpoints
# ========================================

@router.get("/stats", response_model=StatsResponse)
async def get_user_stats(
    user_id: int = Depends(get_current_user_id),
    store: EventStore = Depends(get_event_store),
):
    """
    Get derived statistics for the current user.
    
    Totals, best streak, average daily calories, monthly rollups
    and top exercises. Fails with 500 if the database is unavailable.
    """
    try:
        snapshot = await StatsAggregator(store).get_stats(user_id)
    except RetrievalError as e:
        logger.error("Error fetching user stats", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Error fetching user stats")
    
    return StatsResponse(
        **snapshot.to_dict(),
        lastUpdated=datetime.utcnow(),
    )


@router.get("/reminders", response_model=RemindersResponse)
async def get_reminders(
    response: Response,
    user_id: int = Depends(get_existing_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the dates of the user's most recent workout and food log.
    
    Either value is null when nothing has been logged yet.
    """
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    
    last_workout = (
        await db.execute(select(func.max(WorkoutLog.date)).where(WorkoutLog.user_id == user_id))
    ).scalar_one_or_none()
    last_nutrition = (
        await db.execute(select(func.max(FoodLog.logged_at)).where(FoodLog.user_id == user_id))
    ).scalar_one_or_none()
    
    return RemindersResponse(
        lastWorkout=last_workout,
        lastNutrition=_as_utc(last_nutrition),
    )


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite returns naive timestamps; stored values are always UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
