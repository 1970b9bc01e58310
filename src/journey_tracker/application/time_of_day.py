"""Time-of-day string parsing shared by every schedule consumer."""

import logging
from datetime import date, datetime, time, timedelta, tzinfo

logger = logging.getLogger(__name__)


def parse_time_of_day(
    value: str | None, day: date, tz: tzinfo | None = None
) -> datetime | None:
    """Combine an "HH:MM[:SS]" wall-clock string with a calendar day.

    Args:
        value: Time of day, e.g. "23:50:00". Seconds are optional.
        day: Calendar day the time belongs to.
        tz: Timezone of the wall clock. Naive timestamps are returned when None.

    Returns:
        The timestamp, or None if the string is missing or unparsable.
    """
    if not value:
        return None

    parts = value.strip().split(":")
    if len(parts) < 2 or len(parts) > 3:
        logger.debug(f"Unparsable time of day: {value!r}")
        return None

    try:
        hour = int(parts[0])
        minute = int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
        clock = time(hour, minute, second)
    except ValueError:
        logger.debug(f"Unparsable time of day: {value!r}")
        return None

    return datetime.combine(day, clock, tzinfo=tz)


def previous_day(day: date) -> date:
    """Return the calendar day before `day`."""
    return day - timedelta(days=1)


def next_day(day: date) -> date:
    """Return the calendar day after `day`."""
    return day + timedelta(days=1)
