"""Tests for calendar day bucketing."""

from datetime import date, datetime, timedelta, timezone

import pytest

from fittrack.services.analytics.bucketing import (
    Granularity,
    bucket_days,
    group_by_bucket,
    month_key,
    months_before,
    to_calendar_day,
    truncate,
)


class TestToCalendarDay:
    def test_pure_date_is_unchanged(self):
        assert to_calendar_day(date(2024, 1, 2)) == date(2024, 1, 2)

    def test_naive_datetime_is_taken_as_utc(self):
        assert to_calendar_day(datetime(2024, 1, 2, 23, 59)) == date(2024, 1, 2)

    def test_aware_datetime_is_converted_to_utc_first(self):
        # 2024-01-02 20:00 at UTC-5 is already 01:00 on the 3rd in UTC
        eastern = timezone(timedelta(hours=-5))
        assert to_calendar_day(datetime(2024, 1, 2, 20, 0, tzinfo=eastern)) == date(2024, 1, 3)

    def test_iso_strings(self):
        assert to_calendar_day("2024-01-02") == date(2024, 1, 2)
        assert to_calendar_day("2024-01-02T23:30:00Z") == date(2024, 1, 2)
        assert to_calendar_day("2024-01-02T23:30:00-02:00") == date(2024, 1, 3)

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_calendar_day(12345)


class TestBucketDays:
    def test_empty_input(self):
        assert bucket_days([]) == []

    def test_deduplicates_and_sorts_mixed_sources(self):
        values = [
            datetime(2024, 1, 3, 8, 0, tzinfo=timezone.utc),
            date(2024, 1, 1),
            datetime(2024, 1, 1, 22, 0),
            "2024-01-03",
        ]
        assert bucket_days(values) == [date(2024, 1, 1), date(2024, 1, 3)]

    def test_month_granularity(self):
        values = [date(2024, 2, 29), date(2024, 2, 1), date(2023, 12, 31)]
        assert bucket_days(values, Granularity.MONTH) == [date(2023, 12, 1), date(2024, 2, 1)]


def test_group_by_bucket_orders_keys():
    items = ["2024-03-02", "2024-03-01", "2024-03-02"]
    groups = group_by_bucket(items, lambda s: s)
    assert list(groups) == [date(2024, 3, 1), date(2024, 3, 2)]
    assert len(groups[date(2024, 3, 2)]) == 2


def test_truncate_to_month():
    assert truncate(datetime(2024, 5, 31, 23, 0), Granularity.MONTH) == date(2024, 5, 1)


def test_month_key_is_year_aware():
    assert month_key(date(2023, 6, 1)) == "2023-06"
    assert month_key(date(2024, 6, 1)) == "2024-06"


@pytest.mark.parametrize(
    "day, months, expected",
    [
        (date(2024, 6, 15), 6, date(2023, 12, 15)),
        (date(2024, 8, 31), 6, date(2024, 2, 29)),
        (date(2024, 1, 10), 1, date(2023, 12, 10)),
    ],
)
def test_months_before(day, months, expected):
    assert months_before(day, months) == expected
