"""Journey phase classification."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from journey_tracker.domain.models.journey_phase import JourneyPhase, PhasePolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from journey_tracker.domain.models.stop import ResolvedStop


def first_departure(stops: Sequence[ResolvedStop]) -> datetime | None:
    """Return the first resolved departure (or arrival) of the journey."""
    for stop in stops:
        if stop.latest_time is not None:
            return stop.latest_time
    return None


def last_arrival(stops: Sequence[ResolvedStop]) -> datetime | None:
    """Return the last resolved arrival (or departure) of the journey."""
    for stop in reversed(stops):
        if stop.earliest_time is not None:
            return stop.earliest_time
    return None


class JourneyPhaseClassifier:
    """Classifies a journey as future, past, not yet departed, en route or finished."""

    def __init__(self, policy: PhasePolicy = PhasePolicy.CALENDAR) -> None:
        """Initialize with the phase policy; SCHEDULE never yields PAST_DAY."""
        self.policy = policy

    def classify(
        self, stops: Sequence[ResolvedStop], selected_date: date, now: datetime
    ) -> JourneyPhase:
        """Return the single phase that holds for the journey at `now`.

        Rules are evaluated in order and the first match wins.
        """
        today = now.date()
        if selected_date > today:
            return JourneyPhase.FUTURE_DAY
        if self.policy is not PhasePolicy.SCHEDULE and selected_date < today:
            return JourneyPhase.PAST_DAY

        departure = first_departure(stops)
        if departure is not None and now < departure:
            return JourneyPhase.BEFORE_DEPARTURE

        arrival = last_arrival(stops)
        if arrival is not None and now >= arrival:
            return JourneyPhase.FINISHED

        return JourneyPhase.EN_ROUTE
