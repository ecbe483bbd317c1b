from fittrack.models.user import User
from fittrack.models.workout import WorkoutLog, WorkoutExercise
from fittrack.models.food import FoodLog
from fittrack.models.goal import DailyGoal
from fittrack.models.template import MealTemplate

__all__ = [
    "User",
    "WorkoutLog",
    "WorkoutExercise",
    "FoodLog",
    "DailyGoal",
    "MealTemplate",
]
