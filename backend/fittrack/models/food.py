"""
Food log database model.
"""
from datetime import datetime
from sqlalchemy import String, DateTime, Integer, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.core.database import Base


class FoodLog(Base):
    """A logged food entry. Its day bucket is `logged_at` truncated in UTC."""
    
    __tablename__ = "food_logs"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    food_name: Mapped[str] = mapped_column(String(255), nullable=False)
    serving_size: Mapped[str] = mapped_column(String(100), nullable=False)
    calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    protein: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=True)
    carbs: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=True)
    fats: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=True)
    logged_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
    
    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "foodName": self.food_name,
            "servingSize": self.serving_size,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
            "loggedAt": self.logged_at.isoformat(),
        }
