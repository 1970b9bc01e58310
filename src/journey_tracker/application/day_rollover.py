"""Resolution of schedule time-of-day strings to concrete timestamps."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import TYPE_CHECKING

from journey_tracker.application.time_of_day import next_day, parse_time_of_day, previous_day
from journey_tracker.domain.models.journey_phase import PhasePolicy
from journey_tracker.domain.models.stop import ResolvedStop

if TYPE_CHECKING:
    from collections.abc import Sequence

    from journey_tracker.domain.models.stop import Stop

logger = logging.getLogger(__name__)


class DayRolloverResolver:
    """Maps a stop list onto real timestamps, advancing the day across midnight."""

    def __init__(self, policy: PhasePolicy = PhasePolicy.CALENDAR) -> None:
        """Initialize the resolver.

        Args:
            policy: CALENDAR starts on the previous day whenever its first
                departure has passed but the selected day's has not.
                CALENDAR_RUNNING does so only while that journey is still
                running. SCHEDULE always starts on the selected day.
        """
        self.policy = policy

    @staticmethod
    def reference_time_of_day(stops: Sequence[Stop]) -> str | None:
        """Return the first departure time in the schedule, falling back to arrivals."""
        for stop in stops:
            if stop.departure_time_of_day:
                return stop.departure_time_of_day
        for stop in stops:
            if stop.arrival_time_of_day:
                return stop.arrival_time_of_day
        return None

    def journey_start_day(
        self, reference: str, selected_date: date, now: datetime
    ) -> date | None:
        """Return the candidate start day of the journey.

        The previous day is the candidate when the reference time has already
        passed on it but not yet on the selected day. Returns None when the
        reference time cannot be parsed.
        """
        tz = now.tzinfo
        on_selected = parse_time_of_day(reference, selected_date, tz)
        if on_selected is None:
            return None
        if self.policy is PhasePolicy.SCHEDULE:
            return selected_date

        day_before = previous_day(selected_date)
        on_previous = parse_time_of_day(reference, day_before, tz)
        if on_previous is not None and on_previous <= now < on_selected:
            return day_before
        return selected_date

    def resolve(
        self, stops: Sequence[Stop], selected_date: date, now: datetime
    ) -> list[ResolvedStop]:
        """Resolve every stop's arrival and departure to a timestamp.

        Stops without any time of day are kept with empty timestamps and do not
        take part in rollover detection.

        Args:
            stops: Stops in schedule order.
            selected_date: Day the user selected for the journey.
            now: Current instant; its timezone is used for the wall clock.

        Returns:
            Resolved stops in the same order, or an empty list when the schedule is
            empty or its reference time is unparsable.
        """
        if not stops:
            return []

        reference = self.reference_time_of_day(stops)
        if reference is None:
            logger.warning("Schedule has no usable time of day, cannot resolve stops")
            return []

        start_day = self.journey_start_day(reference, selected_date, now)
        if start_day is None:
            logger.warning(f"Unparsable reference time of day {reference!r}")
            return []

        resolved, last_instant = self._walk(stops, start_day, now.tzinfo)
        if start_day == selected_date:
            return resolved

        if self.policy is PhasePolicy.CALENDAR_RUNNING and (
            last_instant is None or last_instant <= now
        ):
            logger.debug(
                f"Journey of {start_day.isoformat()} already ended, "
                f"using {selected_date.isoformat()}"
            )
            resolved, _ = self._walk(stops, selected_date, now.tzinfo)
        else:
            logger.info(f"Overnight journey detected: started on {start_day.isoformat()}")
        return resolved

    @staticmethod
    def _walk(
        stops: Sequence[Stop], start_day: date, tz: tzinfo | None
    ) -> tuple[list[ResolvedStop], datetime | None]:
        current_day = start_day
        last_instant: datetime | None = None
        resolved: list[ResolvedStop] = []

        for stop in stops:
            times: list[datetime | None] = []
            for value in (stop.arrival_time_of_day, stop.departure_time_of_day):
                instant = parse_time_of_day(value, current_day, tz)
                if instant is not None and last_instant is not None and instant < last_instant:
                    current_day = next_day(current_day)
                    instant = parse_time_of_day(value, current_day, tz)
                if instant is not None:
                    last_instant = instant
                times.append(instant)

            resolved.append(
                ResolvedStop(stop=stop, resolved_arrival=times[0], resolved_departure=times[1])
            )

        return resolved, last_instant
