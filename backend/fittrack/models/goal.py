"""
Daily nutrition goal database model.
"""
from datetime import datetime
from sqlalchemy import DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.core.database import Base

DEFAULT_GOALS = {
    "calorieGoal": 2000,
    "proteinGoal": 50,
    "carbsGoal": 250,
    "fatsGoal": 70,
}


class DailyGoal(Base):
    """Per-user daily macro targets."""
    
    __tablename__ = "daily_goals"
    
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )
    calorie_goal: Mapped[int] = mapped_column(Integer, nullable=False)
    protein_goal: Mapped[int] = mapped_column(Integer, nullable=False)
    carbs_goal: Mapped[int] = mapped_column(Integer, nullable=False)
    fats_goal: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )
    
    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "calorieGoal": self.calorie_goal,
            "proteinGoal": self.protein_goal,
            "carbsGoal": self.carbs_goal,
            "fatsGoal": self.fats_goal,
        }
