"""Alarm validation result domain model."""

from dataclasses import dataclass
from enum import Enum


class AlarmFailureReason(str, Enum):
    """Why a requested alarm offset cannot be honoured."""

    ARRIVAL_IN_PAST = "arrival_in_past"
    INSUFFICIENT_TIME_FOR_ALARM = "insufficient_time_for_alarm"
    ALARM_BEFORE_DEPARTURE = "alarm_before_departure"
    JOURNEY_TOO_SHORT = "journey_too_short"


@dataclass(frozen=True)
class AlarmValidationResult:
    """Outcome of validating an arrival alarm offset.

    The numeric fields carry the values the decision was based on so callers
    can explain a rejection to the user.
    """

    is_valid: bool
    reason: AlarmFailureReason | None = None
    requested_offset_minutes: int | None = None
    minutes_until_arrival: int | None = None
    journey_duration_minutes: int | None = None
    minimum_required_minutes: int | None = None

    @classmethod
    def valid(cls, **context: int) -> "AlarmValidationResult":
        """Create a successful result."""
        return cls(is_valid=True, **context)

    @classmethod
    def invalid(cls, reason: AlarmFailureReason, **context: int) -> "AlarmValidationResult":
        """Create a failed result for the given reason."""
        return cls(is_valid=False, reason=reason, **context)
