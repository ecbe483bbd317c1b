"""Shared fixtures for all tests.

Database tests run against an in-memory SQLite database. Analytics tests
use InMemoryEventStore, which keeps rows in lists and can be told to fail.
"""

import os
from datetime import date, datetime
from typing import List, Optional

# Must be set before fittrack.core.database creates its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fittrack.models  # noqa: F401  registers tables on Base.metadata
from fittrack.core.database import Base, get_db
from fittrack.main import app
from fittrack.models import User
from fittrack.services.analytics.errors import RetrievalError
from fittrack.services.analytics.store import EventStore
from fittrack.services.analytics.types import (
    DateRange,
    ExerciseEntry,
    NutritionRow,
    WorkoutRow,
)

TODAY = date(2024, 6, 15)


class InMemoryEventStore(EventStore):
    """EventStore over plain lists, for one user."""

    def __init__(
        self,
        workouts: Optional[List[WorkoutRow]] = None,
        nutrition: Optional[List[NutritionRow]] = None,
        exercises: Optional[List[ExerciseEntry]] = None,
        fail_with: Optional[Exception] = None,
    ):
        self.workouts = list(workouts or [])
        self.nutrition = list(nutrition or [])
        self.exercises = list(exercises or [])
        self.fail_with = fail_with
        self.calls: List[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    async def count_workouts(self, user_id: int) -> int:
        self._check("count_workouts")
        return len(self.workouts)

    async def fetch_workout_days(self, user_id: int) -> List[date]:
        self._check("fetch_workout_days")
        return sorted({w.date for w in self.workouts})

    async def fetch_workout_rows(
        self, user_id: int, date_range: Optional[DateRange] = None
    ) -> List[WorkoutRow]:
        self._check("fetch_workout_rows")
        return [w for w in self.workouts if date_range is None or date_range.contains(w.date)]

    async def fetch_nutrition_rows(
        self, user_id: int, date_range: Optional[DateRange] = None
    ) -> List[NutritionRow]:
        self._check("fetch_nutrition_rows")
        # Range filtering is left to fetch_bucketed_aggregates
        return list(self.nutrition)

    async def fetch_exercise_entries(self, user_id: int) -> List[ExerciseEntry]:
        self._check("fetch_exercise_entries")
        return list(self.exercises)


def workout(day: str, duration: int = 30) -> WorkoutRow:
    return WorkoutRow(date=date.fromisoformat(day), duration_minutes=duration)


def meal(logged_at: str, calories: float, protein: float = 0, carbs: float = 0, fats: float = 0) -> NutritionRow:
    return NutritionRow(
        logged_at=datetime.fromisoformat(logged_at),
        calories=calories,
        protein_g=protein,
        carbs_g=carbs,
        fats_g=fats,
    )


@pytest.fixture
def failing_store() -> InMemoryEventStore:
    """Store whose every read raises RetrievalError."""
    return InMemoryEventStore(fail_with=RetrievalError("database unreachable"))


def _enable_foreign_keys(dbapi_connection, connection_record):
    """SQLite leaves foreign key constraints off unless asked."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine():
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def user(db) -> User:
    user = User(username="alex", email="alex@example.com", name="Alex")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def client(session_maker):
    """HTTP client against the app, with get_db bound to the test database."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
