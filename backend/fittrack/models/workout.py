"""
Workout log database models.
"""
import datetime as dt
from typing import List
from sqlalchemy import String, Date, DateTime, Text, Integer, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fittrack.core.database import Base


class WorkoutLog(Base):
    """A single logged workout session, bucketed by its calendar date."""
    
    __tablename__ = "workout_logs"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow,
        onupdate=dt.datetime.utcnow
    )
    
    exercises: Mapped[List["WorkoutExercise"]] = relationship(
        back_populates="workout",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="WorkoutExercise.id",
    )
    
    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat(),
            "duration": self.duration,
            "notes": self.notes,
            "exercises": [e.to_dict() for e in self.exercises],
        }


class WorkoutExercise(Base):
    """Exercise entry performed during a workout."""
    
    __tablename__ = "workout_exercises"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workout_logs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float | None] = mapped_column(
        Numeric(6, 2, asdecimal=False),
        nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow
    )
    
    workout: Mapped[WorkoutLog] = relationship(back_populates="exercises")
    
    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "exerciseName": self.exercise_name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
        }
