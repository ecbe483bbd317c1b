"""
Progress API endpoints.
"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from fittrack.api.deps import get_current_user_id, get_event_store
from fittrack.services.analytics import ProgressService
from fittrack.services.analytics.store import EventStore

router = APIRouter()


class WorkoutSeriesResponse(BaseModel):
    dates: list[str]
    durations: list[int]
    counts: list[int]


class NutritionSeriesResponse(BaseModel):
    dates: list[str]
    calories: list[float]
    protein: list[float]
    carbs: list[float]
    fats: list[float]


class ProgressMetricsResponse(BaseModel):
    totalWorkouts: int
    avgDuration: float
    totalCalories: float
    avgCalories: float


class ProgressResponse(BaseModel):
    """Workout and nutrition series on a shared date axis."""
    range: str
    workouts: WorkoutSeriesResponse
    nutrition: NutritionSeriesResponse
    metrics: ProgressMetricsResponse


@router.get("", response_model=ProgressResponse)
async def get_progress(
    range: str = Query("month", description="week, month or year; anything else means month"),
    user_id: int = Depends(get_current_user_id),
    store: EventStore = Depends(get_event_store),
):
    """
    Get chart-ready progress data for the current user.
    
    Always succeeds: database errors produce empty series.
    """
    series = await ProgressService(store).get_progress(user_id, range)
    return ProgressResponse(**series.to_dict())
