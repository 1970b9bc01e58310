"""Tests for alarm timing validation."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from journey_tracker.application.alarm_validator import (
    compute_alarm_time,
    validate_alarm_timing,
)
from journey_tracker.domain.models import AlarmFailureReason

DEPARTURE = datetime(2026, 3, 14, 8, 0, tzinfo=ZoneInfo("Asia/Jakarta"))
ARRIVAL = DEPARTURE + timedelta(minutes=60)


def test_ten_minutes_before_arrival_of_an_hour_journey_is_valid() -> None:
    """Given a 60-minute journey and now at departure, when the offset is 10, then the alarm is valid."""
    result = validate_alarm_timing(10, DEPARTURE, ARRIVAL, DEPARTURE)

    assert result.is_valid is True
    assert result.minutes_until_arrival == 60
    assert result.journey_duration_minutes == 60


def test_offset_longer_than_journey_rings_before_departure() -> None:
    """Given a 60-minute journey, when the offset is 70, then the alarm would ring before departure."""
    result = validate_alarm_timing(70, DEPARTURE, ARRIVAL, DEPARTURE)

    assert result.is_valid is False
    assert result.reason is AlarmFailureReason.ALARM_BEFORE_DEPARTURE
    assert result.journey_duration_minutes == 60


def test_too_little_time_left_before_arrival() -> None:
    """Given now five minutes before arrival, when the offset is 10, then there is insufficient time."""
    result = validate_alarm_timing(10, DEPARTURE, ARRIVAL, ARRIVAL - timedelta(minutes=5))

    assert result.reason is AlarmFailureReason.INSUFFICIENT_TIME_FOR_ALARM
    assert result.minutes_until_arrival == 5


def test_non_positive_offset_is_insufficient() -> None:
    """Given a zero offset, when validating, then it is rejected as insufficient."""
    result = validate_alarm_timing(0, DEPARTURE, ARRIVAL, DEPARTURE)

    assert result.reason is AlarmFailureReason.INSUFFICIENT_TIME_FOR_ALARM


def test_arrival_in_the_past() -> None:
    """Given now after arrival, when validating, then arrival is in the past."""
    result = validate_alarm_timing(10, DEPARTURE, ARRIVAL, ARRIVAL + timedelta(minutes=1))

    assert result.reason is AlarmFailureReason.ARRIVAL_IN_PAST
    assert result.minutes_until_arrival == -1


def test_journey_shorter_than_offset_plus_buffer() -> None:
    """Given a 15-minute journey, when the offset is 10, then the journey is too short for the buffer."""
    result = validate_alarm_timing(10, DEPARTURE, DEPARTURE + timedelta(minutes=15), DEPARTURE)

    assert result.reason is AlarmFailureReason.JOURNEY_TOO_SHORT
    assert result.minimum_required_minutes == 20


def test_departure_not_before_arrival_is_too_short() -> None:
    """Given departure equal to arrival, when validating, then the journey is too short."""
    result = validate_alarm_timing(10, DEPARTURE, DEPARTURE, DEPARTURE - timedelta(hours=1))

    assert result.reason is AlarmFailureReason.JOURNEY_TOO_SHORT


def test_minutes_round_half_away_from_zero() -> None:
    """Given 20.5 minutes until arrival, when validating, then it rounds to 21."""
    now = ARRIVAL - timedelta(minutes=20, seconds=30)

    result = validate_alarm_timing(10, DEPARTURE, ARRIVAL, now)

    assert result.minutes_until_arrival == 21


def test_compute_alarm_time() -> None:
    """Given an arrival, when computing the alarm time, then the offset is subtracted."""
    assert compute_alarm_time(ARRIVAL, 10) == ARRIVAL - timedelta(minutes=10)
