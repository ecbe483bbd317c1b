"""Tests for series alignment and range resolution."""

from datetime import date

from fittrack.services.analytics.aligner import align, build_axis, normalize_range, resolve_range
from fittrack.services.analytics.types import DailyBucket, DateRange


def d(text: str) -> date:
    return date.fromisoformat(text)


def test_axis_is_sorted_union_of_both_sources():
    workouts = {d("2024-01-01"): DailyBucket(count=1), d("2024-01-02"): DailyBucket(count=2)}
    nutrition = {d("2024-01-03"): DailyBucket(calories=500), d("2024-01-02"): DailyBucket(calories=1800)}

    axis = build_axis(workouts, nutrition)

    assert axis == [d("2024-01-01"), d("2024-01-02"), d("2024-01-03")]


def test_missing_days_are_zero_filled_per_source():
    workouts = {d("2024-01-01"): DailyBucket(count=1, duration=45), d("2024-01-02"): DailyBucket(count=2, duration=60)}
    nutrition = {d("2024-01-02"): DailyBucket(calories=1800), d("2024-01-03"): DailyBucket(calories=2100)}
    axis = build_axis(workouts, nutrition)

    workout_series = align(axis, workouts, ("count", "duration"))
    nutrition_series = align(axis, nutrition, ("calories",))

    assert workout_series["count"] == [1, 2, 0]
    assert workout_series["duration"] == [45, 60, 0]
    assert nutrition_series["calories"] == [0, 1800, 2100]


def test_axis_is_not_a_dense_calendar():
    workouts = {d("2024-01-01"): DailyBucket(count=1), d("2024-01-20"): DailyBucket(count=1)}
    assert build_axis(workouts, {}) == [d("2024-01-01"), d("2024-01-20")]


def test_axis_is_clipped_to_range():
    workouts = {d("2023-12-31"): DailyBucket(count=1), d("2024-01-05"): DailyBucket(count=1)}
    date_range = DateRange(start=d("2024-01-01"), end=d("2024-01-31"))
    assert build_axis(workouts, date_range=date_range) == [d("2024-01-05")]


def test_align_accepts_mappings_and_none_values():
    source = {d("2024-01-01"): {"calories": None, "protein": 30}}
    series = align([d("2024-01-01")], source, ("calories", "protein", "fats"))
    assert series == {"calories": [0], "protein": [30], "fats": [0]}


def test_empty_sources_give_empty_axis():
    assert build_axis({}, {}) == []
    assert align([], {}, ("count",)) == {"count": []}


class TestRanges:
    def test_known_ranges(self):
        today = d("2024-06-15")
        assert resolve_range("week", today) == ("week", DateRange(d("2024-06-09"), today))
        assert resolve_range("month", today) == ("month", DateRange(d("2024-05-17"), today))
        assert resolve_range("year", today)[1].start == d("2023-06-17")

    def test_unknown_range_falls_back_to_month(self):
        today = d("2024-06-15")
        assert resolve_range("decade", today) == resolve_range("month", today)
        assert resolve_range(None, today) == resolve_range("month", today)
        assert resolve_range("", today) == resolve_range("month", today)

    def test_keywords_are_case_insensitive(self):
        assert normalize_range(" Week ") == "week"
