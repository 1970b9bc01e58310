"""Validation of arrival alarm offsets against journey timing."""

import math
from datetime import datetime, timedelta

from journey_tracker.domain.models.alarm_validation import (
    AlarmFailureReason,
    AlarmValidationResult,
)

# Extra minutes a journey must last beyond the alarm offset
MINIMUM_BUFFER_MINUTES = 10


def _round_minutes(delta: timedelta) -> int:
    """Round a duration to whole minutes, halves away from zero."""
    minutes = delta.total_seconds() / 60
    return int(math.copysign(math.floor(abs(minutes) + 0.5), minutes))


def compute_alarm_time(arrival: datetime, offset_minutes: int) -> datetime:
    """Return the instant an alarm `offset_minutes` before arrival should fire."""
    return arrival - timedelta(minutes=offset_minutes)


def validate_alarm_timing(
    offset_minutes: int, departure: datetime, arrival: datetime, now: datetime
) -> AlarmValidationResult:
    """Check whether an alarm `offset_minutes` before arrival makes sense.

    Checks short-circuit in order. The offset is compared against the whole
    journey before the remaining time, so an offset longer than the journey is
    always reported as firing before departure. The order matters when both
    checks fail: a 70 minute offset on a 60 minute journey validated at the
    moment of departure yields ALARM_BEFORE_DEPARTURE here, whereas checking
    the remaining time first would yield INSUFFICIENT_TIME_FOR_ALARM.

    Args:
        offset_minutes: Minutes before arrival the alarm should ring.
        departure: Departure from the boarding station.
        arrival: Arrival at the destination station.
        now: Current instant.

    Returns:
        A valid result, or an invalid one carrying the reason and the numbers used.
    """
    minutes_until_arrival = _round_minutes(arrival - now)
    journey_duration = _round_minutes(arrival - departure)
    minimum_required = offset_minutes + MINIMUM_BUFFER_MINUTES

    if offset_minutes <= 0:
        return AlarmValidationResult.invalid(
            AlarmFailureReason.INSUFFICIENT_TIME_FOR_ALARM,
            requested_offset_minutes=offset_minutes,
            minutes_until_arrival=minutes_until_arrival,
        )

    if departure >= arrival:
        return AlarmValidationResult.invalid(
            AlarmFailureReason.JOURNEY_TOO_SHORT,
            requested_offset_minutes=offset_minutes,
            journey_duration_minutes=journey_duration,
            minimum_required_minutes=minimum_required,
        )

    if minutes_until_arrival <= 0:
        return AlarmValidationResult.invalid(
            AlarmFailureReason.ARRIVAL_IN_PAST,
            minutes_until_arrival=minutes_until_arrival,
        )

    if offset_minutes >= journey_duration:
        return AlarmValidationResult.invalid(
            AlarmFailureReason.ALARM_BEFORE_DEPARTURE,
            requested_offset_minutes=offset_minutes,
            journey_duration_minutes=journey_duration,
        )

    if minutes_until_arrival <= offset_minutes:
        return AlarmValidationResult.invalid(
            AlarmFailureReason.INSUFFICIENT_TIME_FOR_ALARM,
            requested_offset_minutes=offset_minutes,
            minutes_until_arrival=minutes_until_arrival,
        )

    if journey_duration < minimum_required:
        return AlarmValidationResult.invalid(
            AlarmFailureReason.JOURNEY_TOO_SHORT,
            requested_offset_minutes=offset_minutes,
            journey_duration_minutes=journey_duration,
            minimum_required_minutes=minimum_required,
        )

    return AlarmValidationResult.valid(
        requested_offset_minutes=offset_minutes,
        minutes_until_arrival=minutes_until_arrival,
        journey_duration_minutes=journey_duration,
    )
