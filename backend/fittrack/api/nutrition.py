"""
Nutrition logging API endpoints.
"""
from datetime import date, datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import get_current_user_id, get_existing_user_id
from fittrack.core.database import MAX_AMOUNT, get_db
from fittrack.core.logging import get_logger
from fittrack.models.food import FoodLog
from fittrack.models.goal import DEFAULT_GOALS, DailyGoal
from fittrack.models.template import MealTemplate

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class NutrientsRequest(BaseModel):
    """Nutrient amounts for one serving."""
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0, le=MAX_AMOUNT)
    totalCarbs: float = Field(0, ge=0, le=MAX_AMOUNT)
    totalFat: float = Field(0, ge=0, le=MAX_AMOUNT)


class LogFoodRequest(BaseModel):
    """Request to log a food entry."""
    food_name: str = Field(..., min_length=1, max_length=255)
    serving_size: str = Field(..., min_length=1, max_length=100)
    nutrients: NutrientsRequest
    logged_at: datetime | None = Field(None, description="Defaults to now")


class FoodLogResponse(BaseModel):
    id: int
    foodName: str
    servingSize: str
    calories: int | None
    protein: float | None
    carbs: float | None
    fats: float | None
    loggedAt: str


class GoalsRequest(BaseModel):
    """Request to set daily nutrition goals."""
    calorieGoal: int = Field(..., gt=0)
    proteinGoal: int = Field(..., gt=0)
    carbsGoal: int = Field(..., gt=0)
    fatsGoal: int = Field(..., gt=0)


class GoalsResponse(BaseModel):
    calorieGoal: int
    proteinGoal: int
    carbsGoal: int
    fatsGoal: int


class TemplateFood(BaseModel):
    """One food within a meal template."""
    foodName: str = Field(..., min_length=1, max_length=255)
    servingSize: str = Field(..., min_length=1, max_length=100)
    nutrients: NutrientsRequest


class TemplateRequest(BaseModel):
    """Request to create or replace a meal template."""
    name: str = Field(..., min_length=1, max_length=255)
    foods: list[TemplateFood] = Field(..., min_length=1)


class TemplateResponse(BaseModel):
    id: int
    name: str
    foods: list[TemplateFood]
    createdAt: str | None
    updatedAt: str | None


# ========================================
# API Endpoints
# ========================================

@router.post("/log", response_model=FoodLogResponse, status_code=201)
async def log_food(
    request: LogFoodRequest,
    user_id: int = Depends(get_existing_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Log a food entry.

    Timestamps are stored in UTC; naive timestamps are taken as UTC.
    """
    food = FoodLog(
        user_id=user_id,
        food_name=request.food_name,
        serving_size=request.serving_size,
        calories=round(request.nutrients.calories),
        protein=round(request.nutrients.protein, 2),
        carbs=round(request.nutrients.totalCarbs, 2),
        fats=round(request.nutrients.totalFat, 2),
        logged_at=_to_utc(request.logged_at or datetime.now(timezone.utc)),
    )
    db.add(food)
    await db.flush()

    logger.info("Food logged", user_id=user_id, food_log_id=food.id)

    return FoodLogResponse(**food.to_dict())


@router.get("/logs/{day}", response_model=list[FoodLogResponse])
async def food_logs_for_day(
    day: date,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the food entries logged on one UTC calendar day, newest first.
    """
    lower = datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)
    upper = lower + timedelta(days=1)

    result = await db.execute(
        select(FoodLog)
        .where(
            FoodLog.user_id == user_id,
            FoodLog.logged_at >= lower,
            FoodLog.logged_at < upper,
        )
        .order_by(FoodLog.logged_at.desc())
    )
    return [FoodLogResponse(**f.to_dict()) for f in result.scalars().all()]


@router.delete("/logs/{log_id}")
async def delete_food_log(
    log_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a food entry owned by the current user.
    """
    result = await db.execute(select(FoodLog).where(FoodLog.id == log_id))
    food = result.scalar_one_or_none()

    if not food:
        raise HTTPException(status_code=404, detail="Food log entry not found")
    if food.user_id != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized to delete this food log entry")

    await db.delete(food)

    logger.info("Food log deleted", user_id=user_id, food_log_id=log_id)

    return {"message": "Food log entry deleted successfully"}


@router.get("/goals", response_model=GoalsResponse)
async def get_goals(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get daily nutrition goals, or the defaults if none are set.
    """
    goal = await db.get(DailyGoal, user_id)
    if not goal:
        return GoalsResponse(**DEFAULT_GOALS)
    return GoalsResponse(**goal.to_dict())


@router.post("/goals", response_model=GoalsResponse)
async def set_goals(
    request: GoalsRequest,
    user_id: int = Depends(get_existing_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Create or replace daily nutrition goals.
    """
    goal = await db.get(DailyGoal, user_id)
    if not goal:
        goal = DailyGoal(user_id=user_id)
        db.add(goal)

    goal.calorie_goal = request.calorieGoal
    goal.protein_goal = request.proteinGoal
    goal.carbs_goal = request.carbsGoal
    goal.fats_goal = request.fatsGoal
    await db.flush()

    logger.info("Nutrition goals updated", user_id=user_id)

    return GoalsResponse(**goal.to_dict())


@router.get("/templates", response_model=list[TemplateResponse])
async def list_templates(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the current user's meal templates, newest first.
    """
    result = await db.execute(
        select(MealTemplate)
        .where(MealTemplate.user_id == user_id)
        .order_by(MealTemplate.created_at.desc(), MealTemplate.id.desc())
    )
    return [TemplateResponse(**t.to_dict()) for t in result.scalars().all()]


@router.get("/templates/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get one meal template owned by the current user.
    """
    template = await _get_own_template(db, template_id, user_id)
    return TemplateResponse(**template.to_dict())


@router.post("/templates", response_model=TemplateResponse, status_code=201)
async def create_template(
    request: TemplateRequest,
    user_id: int = Depends(get_existing_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Save a named list of foods as a meal template.
    """
    template = MealTemplate(
        user_id=user_id,
        name=request.name,
        foods=[f.model_dump() for f in request.foods],
    )
    db.add(template)
    await db.flush()

    logger.info("Meal template created", user_id=user_id, template_id=template.id)

    return TemplateResponse(**template.to_dict())


@router.put("/templates/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: int,
    request: TemplateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace the name and foods of a meal template.
    """
    template = await _get_own_template(db, template_id, user_id)
    template.name = request.name
    template.foods = [f.model_dump() for f in request.foods]
    await db.flush()

    logger.info("Meal template updated", user_id=user_id, template_id=template_id)

    return TemplateResponse(**template.to_dict())


@router.delete("/templates/{template_id}")
async def delete_template(
    template_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a meal template owned by the current user.
    """
    template = await _get_own_template(db, template_id, user_id)
    await db.delete(template)

    logger.info("Meal template deleted", user_id=user_id, template_id=template_id)

    return {"message": "Template deleted successfully"}


async def _get_own_template(db: AsyncSession, template_id: int, user_id: int) -> MealTemplate:
    """Load a template, 404 when missing or owned by someone else."""
    result = await db.execute(
        select(MealTemplate).where(
            MealTemplate.id == template_id,
            MealTemplate.user_id == user_id,
        )
    )
    template = result.scalar_one_or_none()
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
