"""
Workout logging API endpoints.
"""
import re
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user_id, get_existing_user_id
from fittrack.core.config import settings
from fittrack.core.database import MAX_AMOUNT, get_db
from fittrack.core.logging import get_logger
from fittrack.models.workout import WorkoutExercise, WorkoutLog

logger = get_logger(__name__)
router = APIRouter()

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# ========================================
# Request/Response Schemas
# ========================================

class ExerciseEntryRequest(BaseModel):
    """Exercise performed during a workout."""
    name: str = Field(..., min_length=1, max_length=255, description="Exercise name")
    sets: int = Field(..., gt=0)
    reps: int = Field(..., gt=0)
    weight: float | None = Field(None, ge=0, le=MAX_AMOUNT, description="Weight used, if any")


class CreateWorkoutRequest(BaseModel):
    """Request to log a workout."""
    name: str = Field(..., min_length=1, max_length=255, description="Workout name")
    date: date
    duration: int = Field(..., gt=0, description="Duration in minutes")
    notes: str | None = None
    exercises: list[ExerciseEntryRequest] = Field(..., min_length=1)


class CreateWorkoutResponse(BaseModel):
    message: str
    workoutId: int


class WorkoutResponse(BaseModel):
    """Workout log with its exercises."""
    id: int
    name: str
    date: str
    duration: int
    notes: str | None
    exercises: list[dict[str, Any]]


# ========================================
# API Endpoints
# ========================================

@router.post("/log", response_model=CreateWorkoutResponse, status_code=201)
async def log_workout(
    request: CreateWorkoutRequest,
    user_id: int = Depends(get_existing_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Log a workout together with its exercise entries.
    """
    workout = WorkoutLog(
        user_id=user_id,
        name=request.name,
        date=request.date,
        duration=request.duration,
        notes=request.notes,
        exercises=[
            WorkoutExercise(
                exercise_name=e.name,
                sets=e.sets,
                reps=e.reps,
                weight=e.weight,
            )
            for e in request.exercises
        ],
    )
    db.add(workout)
    await db.flush()

    logger.info(
        "Workout logged",
        user_id=user_id,
        workout_id=workout.id,
        exercise_count=len(request.exercises)
    )

    return CreateWorkoutResponse(message="Workout logged successfully", workoutId=workout.id)


@router.get("/history", response_model=list[WorkoutResponse])
async def workout_history(
    limit: int | None = Query(None, gt=0, le=200),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the most recent workouts, newest first.
    """
    result = await db.execute(
        select(WorkoutLog)
        .where(WorkoutLog.user_id == user_id)
        .order_by(WorkoutLog.date.desc(), WorkoutLog.id.desc())
        .limit(limit or settings.WORKOUT_HISTORY_LIMIT)
    )
    return [WorkoutResponse(**w.to_dict()) for w in result.scalars().all()]


@router.get("/logs", response_model=list[WorkoutResponse])
async def list_workouts(
    startDate: str | None = Query(None, description="YYYY-MM-DD"),
    endDate: str | None = Query(None, description="YYYY-MM-DD"),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get workouts, optionally restricted to an inclusive date range.
    """
    start = _parse_date(startDate, "start")
    end = _parse_date(endDate, "end")
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="Start date cannot be after end date")

    stmt = select(WorkoutLog).where(WorkoutLog.user_id == user_id)
    if start:
        stmt = stmt.where(WorkoutLog.date >= start)
    if end:
        stmt = stmt.where(WorkoutLog.date <= end)

    result = await db.execute(stmt.order_by(WorkoutLog.date.desc(), WorkoutLog.id.desc()))
    return [WorkoutResponse(**w.to_dict()) for w in result.scalars().all()]


@router.delete("/logs/{workout_id}")
async def delete_workout(
    workout_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete one of the current user's workouts.
    """
    result = await db.execute(
        select(WorkoutLog).where(
            WorkoutLog.id == workout_id,
            WorkoutLog.user_id == user_id,
        )
    )
    workout = result.scalar_one_or_none()

    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")

    await db.delete(workout)

    logger.info("Workout deleted", user_id=user_id, workout_id=workout_id)

    return {"message": "Workout deleted successfully"}


def _parse_date(value: str | None, label: str) -> date | None:
    """Parse an optional YYYY-MM-DD query value. Empty strings mean no bound."""
    if value is None or not value.strip():
        return None
    try:
        if not DATE_PATTERN.match(value):
            raise ValueError(value)
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} date format")
