"""Per-stop journey timeline construction and tick refresh."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import TYPE_CHECKING

from journey_tracker.application.day_rollover import DayRolloverResolver
from journey_tracker.application.phase import JourneyPhaseClassifier
from journey_tracker.application.progress import interpolate_progress
from journey_tracker.domain.models.journey_phase import JourneyPhase, PhasePolicy
from journey_tracker.domain.models.timeline import Timeline
from journey_tracker.domain.models.timeline_item import StopState, TimelineItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from journey_tracker.domain.models.stop import ResolvedStop, Stop

logger = logging.getLogger(__name__)

_ALL_UPCOMING = (JourneyPhase.FUTURE_DAY, JourneyPhase.BEFORE_DEPARTURE)
_ALL_COMPLETED = (JourneyPhase.PAST_DAY, JourneyPhase.FINISHED)


def current_stop_index(stops: Sequence[ResolvedStop], now: datetime) -> int | None:
    """Index of the stop the train is at or has just departed from.

    Prefers the stop pair whose departure/arrival window contains `now`, and
    falls back to the last stop already reached.
    """
    for index in range(len(stops) - 1):
        departure = stops[index].resolved_departure
        arrival = stops[index + 1].resolved_arrival
        if departure is not None and arrival is not None and departure <= now < arrival:
            return index

    reached: int | None = None
    for index, stop in enumerate(stops):
        moment = stop.latest_time
        if moment is not None and moment <= now:
            reached = index
    return reached


def _state_for(phase: JourneyPhase, index: int, current_index: int | None) -> StopState:
    if phase in _ALL_UPCOMING:
        return StopState.UPCOMING
    if phase in _ALL_COMPLETED:
        return StopState.COMPLETED
    if current_index is None or index > current_index:
        return StopState.UPCOMING
    if index < current_index:
        return StopState.COMPLETED
    return StopState.CURRENT


def _progress_for(
    phase: JourneyPhase, stops: Sequence[ResolvedStop], index: int, now: datetime
) -> float | None:
    if index >= len(stops) - 1:
        return None
    if phase in _ALL_UPCOMING:
        return 0.0
    if phase in _ALL_COMPLETED:
        return 1.0

    current = stops[index]
    following = stops[index + 1]
    return interpolate_progress(
        current.resolved_departure or current.resolved_arrival,
        following.resolved_arrival or following.resolved_departure,
        now,
    )


class TimelineBuilder:
    """Builds the display timeline of a journey and refreshes it on every tick.

    A full build resolves the schedule and should only run when the schedule or
    the selected date changes. `refresh` reuses the resolved timestamps and only
    recomputes states and progress, so the list keeps its identity between ticks.
    """

    def __init__(self, policy: PhasePolicy = PhasePolicy.CALENDAR) -> None:
        """Initialize the builder with a phase policy shared by resolver and classifier."""
        self.policy = policy
        self.resolver = DayRolloverResolver(policy)
        self.classifier = JourneyPhaseClassifier(policy)

    def build(self, stops: Sequence[Stop], selected_date: date, now: datetime) -> Timeline:
        """Resolve the schedule and compute the timeline for `now`."""
        resolved = self.resolver.resolve(stops, selected_date, now)
        if not resolved:
            return Timeline(phase=self.classifier.classify([], selected_date, now), items=[])
        return self.compose(resolved, selected_date, now)

    def compose(
        self, resolved: Sequence[ResolvedStop], selected_date: date, now: datetime
    ) -> Timeline:
        """Compute states and progress for already resolved stops."""
        phase = self.classifier.classify(resolved, selected_date, now)
        current_index = (
            current_stop_index(resolved, now) if phase is JourneyPhase.EN_ROUTE else None
        )

        items = [
            TimelineItem(
                stop_ref=stop,
                state=_state_for(phase, index, current_index),
                progress_to_next=_progress_for(phase, resolved, index, now),
            )
            for index, stop in enumerate(resolved)
        ]
        logger.debug(
            f"Timeline at {now.isoformat()}: phase={phase.value}, current={current_index}, "
            f"stops={len(items)}"
        )
        return Timeline(phase=phase, items=items)

    def refresh(self, timeline: Timeline, selected_date: date, now: datetime) -> Timeline:
        """Recompute only state and progress of an existing timeline.

        Items whose values do not change are returned as the same objects.
        """
        if not timeline.items:
            return Timeline(
                phase=self.classifier.classify([], selected_date, now), items=timeline.items
            )

        resolved = [item.stop_ref for item in timeline.items]
        fresh = self.compose(resolved, selected_date, now)
        items = [
            old
            if old.state is new.state and old.progress_to_next == new.progress_to_next
            else replace(old, state=new.state, progress_to_next=new.progress_to_next)
            for old, new in zip(timeline.items, fresh.items, strict=True)
        ]
        return Timeline(phase=fresh.phase, items=items)
