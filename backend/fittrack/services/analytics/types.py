"""
Value types shared by the analytics pipeline.

Raw rows come out of the event store; everything else is derived per
request and never persisted.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class EventSource(str, Enum):
    """Event tables the store can bucket."""
    WORKOUT = "workout"
    NUTRITION = "nutrition"


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    start: date
    end: date
    
    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


# ========================================
# Raw rows (Event Store output)
# ========================================

@dataclass(frozen=True)
class WorkoutRow:
    """One workout log row."""
    date: date
    duration_minutes: int


@dataclass(frozen=True)
class NutritionRow:
    """One food log row."""
    logged_at: datetime
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fats_g: float = 0.0


@dataclass(frozen=True)
class ExerciseEntry:
    """One exercise performed within a workout."""
    exercise_name: str
    weight: Optional[float] = None


# ========================================
# Derived values
# ========================================

@dataclass
class DailyBucket:
    """Per-day aggregate of one event source."""
    count: int = 0
    duration: int = 0  # minutes
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


@dataclass(frozen=True)
class MonthlyRollup:
    month: str  # YYYY-MM
    active_days: int
    total_workouts: int
    total_duration: int
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "activeDays": self.active_days,
            "totalWorkouts": self.total_workouts,
            "totalDuration": self.total_duration,
        }


@dataclass(frozen=True)
class ExerciseSummary:
    exercise_name: str
    times_performed: int
    avg_weight: float
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "exerciseName": self.exercise_name,
            "timesPerformed": self.times_performed,
            "avgWeight": self.avg_weight,
        }


@dataclass(frozen=True)
class StatsSnapshot:
    """
    Full statistics for one user at one point in time.
    
    A pure function of the user's stored events and `as_of`.
    """
    total_workouts: int
    streak_days: int
    avg_daily_calories: float
    monthly_rollups: List[MonthlyRollup] = field(default_factory=list)
    top_exercises: List[ExerciseSummary] = field(default_factory=list)
    as_of: Optional[date] = None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "totalWorkouts": self.total_workouts,
            "streak": self.streak_days,
            "avgCalories": self.avg_daily_calories,
            "monthlyStats": [m.to_dict() for m in self.monthly_rollups],
            "topExercises": [e.to_dict() for e in self.top_exercises],
            "asOf": self.as_of.isoformat() if self.as_of else None,
        }


@dataclass
class WorkoutSeries:
    dates: List[str] = field(default_factory=list)
    durations: List[int] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)


@dataclass
class NutritionSeries:
    dates: List[str] = field(default_factory=list)
    calories: List[float] = field(default_factory=list)
    protein: List[float] = field(default_factory=list)
    carbs: List[float] = field(default_factory=list)
    fats: List[float] = field(default_factory=list)


@dataclass
class ProgressMetrics:
    total_workouts: int = 0
    avg_duration: float = 0.0
    total_calories: float = 0.0
    avg_calories: float = 0.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalWorkouts": self.total_workouts,
            "avgDuration": self.avg_duration,
            "totalCalories": self.total_calories,
            "avgCalories": self.avg_calories,
        }


@dataclass
class ProgressSeries:
    """
    Workout and nutrition series aligned on one shared date axis.
    
    `workouts.dates` and `nutrition.dates` are always the same axis.
    """
    range: str
    workouts: WorkoutSeries = field(default_factory=WorkoutSeries)
    nutrition: NutritionSeries = field(default_factory=NutritionSeries)
    metrics: ProgressMetrics = field(default_factory=ProgressMetrics)
    
    @classmethod
    def empty(cls, range_name: str) -> "ProgressSeries":
        """Well-formed response with no data points and zero metrics."""
        return cls(range=range_name)
    
    def is_empty(self) -> bool:
        return not self.workouts.dates and not self.nutrition.dates
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "range": self.range,
            "workouts": {
                "dates": list(self.workouts.dates),
                "durations": list(self.workouts.durations),
                "counts": list(self.workouts.counts),
            },
            "nutrition": {
                "dates": list(self.nutrition.dates),
                "calories": list(self.nutrition.calories),
                "protein": list(self.nutrition.protein),
                "carbs": list(self.nutrition.carbs),
                "fats": list(self.nutrition.fats),
            },
            "metrics": self.metrics.to_dict(),
        }
