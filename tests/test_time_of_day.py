"""Tests for time-of-day parsing."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from journey_tracker.application.time_of_day import next_day, parse_time_of_day, previous_day


def test_parses_hours_minutes_seconds(tz: ZoneInfo, travel_day: date) -> None:
    """Given "HH:MM:SS", when parsing, then the timestamp lies on the given day."""
    result = parse_time_of_day("23:50:30", travel_day, tz)

    assert result == datetime(2026, 3, 14, 23, 50, 30, tzinfo=tz)


def test_parses_without_seconds(tz: ZoneInfo, travel_day: date) -> None:
    """Given "HH:MM", when parsing, then seconds default to zero."""
    result = parse_time_of_day("07:05", travel_day, tz)

    assert result == datetime(2026, 3, 14, 7, 5, tzinfo=tz)


def test_returns_naive_timestamp_without_timezone(travel_day: date) -> None:
    """Given no timezone, when parsing, then a naive timestamp is returned."""
    result = parse_time_of_day("10:00:00", travel_day)

    assert result is not None
    assert result.tzinfo is None


def test_missing_or_malformed_values_return_none(tz: ZoneInfo, travel_day: date) -> None:
    """Given empty, malformed or out-of-range values, when parsing, then None is returned."""
    for value in (None, "", "noon", "25:00:00", "10", "10:00:00:00", "ab:cd"):
        assert parse_time_of_day(value, travel_day, tz) is None


def test_previous_and_next_day_cross_month_boundaries() -> None:
    """Given month boundaries, when stepping days, then the calendar rolls over."""
    assert previous_day(date(2026, 3, 1)) == date(2026, 2, 28)
    assert next_day(date(2026, 12, 31)) == date(2027, 1, 1)
