"""Tests for StatsAggregator."""

import pytest

from conftest import TODAY, InMemoryEventStore, meal, workout
from fittrack.services.analytics.aggregator import (
    StatsAggregator,
    average_daily_calories,
    monthly_rollups,
    top_exercises,
)
from fittrack.services.analytics.errors import RetrievalError
from fittrack.services.analytics.types import DailyBucket, ExerciseEntry


def make_aggregator(store: InMemoryEventStore) -> StatsAggregator:
    return StatsAggregator(store, clock=lambda: TODAY, rollup_months=6, top_exercises_limit=5)


@pytest.fixture
def populated_store() -> InMemoryEventStore:
    return InMemoryEventStore(
        workouts=[
            workout("2023-11-20", 40),
            workout("2024-01-01", 30),
            workout("2024-01-02", 45),
            workout("2024-01-03", 60),
            workout("2024-01-10", 20),
            workout("2024-06-01", 50),
            workout("2024-06-01", 25),
        ],
        nutrition=[
            meal("2024-06-10T08:00:00+00:00", 500),
            meal("2024-06-10T19:00:00+00:00", 1000),
            meal("2024-06-11T12:00:00+00:00", 2500),
        ],
        exercises=[
            ExerciseEntry("Squat", 100),
            ExerciseEntry("Squat", 110),
            ExerciseEntry("Push-up", None),
            ExerciseEntry("Push-up", None),
            ExerciseEntry("Bench Press", 60),
        ],
    )


class TestGetStats:
    async def test_full_snapshot(self, populated_store):
        snapshot = await make_aggregator(populated_store).get_stats(1)

        assert snapshot.total_workouts == 7
        assert snapshot.streak_days == 3
        assert snapshot.avg_daily_calories == 2000.0
        assert snapshot.as_of == TODAY

    async def test_user_without_events_gets_zeroes(self):
        snapshot = await make_aggregator(InMemoryEventStore()).get_stats(1)

        assert snapshot.total_workouts == 0
        assert snapshot.streak_days == 0
        assert snapshot.avg_daily_calories == 0.0
        assert snapshot.monthly_rollups == []
        assert snapshot.top_exercises == []

    async def test_repeated_calls_are_identical(self, populated_store):
        aggregator = make_aggregator(populated_store)
        first = await aggregator.get_stats(1)
        second = await aggregator.get_stats(1)
        assert first == second
        assert first.to_dict() == second.to_dict()

    async def test_rollups_only_cover_trailing_window(self, populated_store):
        snapshot = await make_aggregator(populated_store).get_stats(1)

        assert [r.month for r in snapshot.monthly_rollups] == ["2024-06", "2024-01"]
        june = snapshot.monthly_rollups[0]
        assert june.active_days == 1
        assert june.total_workouts == 2
        assert june.total_duration == 75

    async def test_retrieval_error_propagates(self, failing_store):
        with pytest.raises(RetrievalError):
            await make_aggregator(failing_store).get_stats(1)

    async def test_other_store_failures_become_retrieval_errors(self):
        store = InMemoryEventStore(fail_with=ConnectionError("connection refused"))
        with pytest.raises(RetrievalError) as exc_info:
            await make_aggregator(store).get_stats(1)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_snapshot_serialization(self, populated_store):
        data = (await make_aggregator(populated_store).get_stats(1)).to_dict()

        assert data["totalWorkouts"] == 7
        assert data["streak"] == 3
        assert data["avgCalories"] == 2000.0
        assert data["monthlyStats"][0] == {
            "month": "2024-06",
            "activeDays": 1,
            "totalWorkouts": 2,
            "totalDuration": 75,
        }
        assert data["asOf"] == "2024-06-15"


class TestAverageDailyCalories:
    def test_days_without_logs_do_not_count(self):
        buckets = {
            TODAY: DailyBucket(calories=1500),
            TODAY.replace(day=1): DailyBucket(calories=2500),
        }
        assert average_daily_calories(buckets) == 2000.0

    def test_empty(self):
        assert average_daily_calories({}) == 0.0

    def test_rounded_to_two_decimals(self):
        buckets = {
            TODAY: DailyBucket(calories=100),
            TODAY.replace(day=1): DailyBucket(calories=100),
            TODAY.replace(day=2): DailyBucket(calories=101),
        }
        assert average_daily_calories(buckets) == 100.33


def test_monthly_rollups_keep_years_apart():
    rows = [workout("2023-06-05"), workout("2024-06-05"), workout("2024-06-06")]
    rollups = monthly_rollups(rows)
    assert [(r.month, r.total_workouts) for r in rollups] == [("2024-06", 2), ("2023-06", 1)]


class TestTopExercises:
    def test_ordered_by_count(self, populated_store):
        summaries = top_exercises(populated_store.exercises)

        assert [s.exercise_name for s in summaries] == ["Push-up", "Squat", "Bench Press"]
        assert summaries[1].avg_weight == 105.0

    def test_missing_weight_counts_as_zero(self):
        entries = [ExerciseEntry("Deadlift", 100), ExerciseEntry("Deadlift", None)]
        assert top_exercises(entries)[0].avg_weight == 50.0

    def test_limit_and_name_tie_break(self):
        entries = [ExerciseEntry(name, 10) for name in ("F", "E", "D", "C", "B", "A")]
        summaries = top_exercises(entries, limit=5)
        assert [s.exercise_name for s in summaries] == ["A", "B", "C", "D", "E"]
