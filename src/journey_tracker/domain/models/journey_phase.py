"""Journey phase and phase policy."""

from enum import Enum


class JourneyPhase(str, Enum):
    """Coarse lifecycle state of a journey relative to now."""

    FUTURE_DAY = "future_day"
    PAST_DAY = "past_day"
    BEFORE_DEPARTURE = "before_departure"
    EN_ROUTE = "en_route"
    FINISHED = "finished"


class PhasePolicy(str, Enum):
    """How a journey's calendar day is interpreted.

    CALENDAR applies the PastDay rule and starts the journey on the day before
    the selected day whenever now lies between the first departure on that day
    and the first departure on the selected day. CALENDAR_RUNNING does the same
    but only while the previous day's journey is still running, so a daytime
    train viewed early in the morning stays on the selected day. SCHEDULE treats
    the selected day as the start day and classifies past days purely by their
    resolved timestamps.
    """

    CALENDAR = "calendar"
    CALENDAR_RUNNING = "calendar_running"
    SCHEDULE = "schedule"
