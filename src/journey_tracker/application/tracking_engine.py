"""Pure recompute entry point for one tracking session."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

from journey_tracker.application.alarm_validator import validate_alarm_timing
from journey_tracker.application.phase import first_departure
from journey_tracker.application.timeline_builder import TimelineBuilder
from journey_tracker.application.train_projector import (
    TrainPositionProjector,
    segments_from_resolved_stops,
)
from journey_tracker.domain.models.journey_phase import JourneyPhase, PhasePolicy
from journey_tracker.domain.models.segment import TrainJourney
from journey_tracker.domain.models.timeline import Timeline, TrackingSnapshot

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from journey_tracker.domain.models.alarm_validation import AlarmValidationResult
    from journey_tracker.domain.models.projected_train import ProjectedTrain
    from journey_tracker.domain.models.route import Route
    from journey_tracker.domain.models.segment import Segment
    from journey_tracker.domain.models.station import Station
    from journey_tracker.domain.models.train_schedule import TrainSchedule

logger = logging.getLogger(__name__)


class JourneyTrackingEngine:
    """Computes timeline and projected position from (schedule, selected date, now).

    One engine instance serves one tracking session. It holds only its
    lookups and policy, so identical inputs always give identical outputs.
    """

    def __init__(
        self,
        stations_by_id: Mapping[str, Station] | None = None,
        routes_by_id: Mapping[str, Route] | None = None,
        policy: PhasePolicy = PhasePolicy.CALENDAR,
    ) -> None:
        """Initialize the engine.

        Args:
            stations_by_id: Station lookup used for positions.
            routes_by_id: Route polylines used for on-track interpolation.
            policy: Phase policy applied to this session.
        """
        self.policy = policy
        self.timeline_builder = TimelineBuilder(policy)
        self.projector = TrainPositionProjector(stations_by_id or {}, routes_by_id)

    def recompute(
        self,
        schedule: TrainSchedule | None,
        selected_date: date,
        now: datetime,
        segments: Sequence[Segment] | None = None,
    ) -> TrackingSnapshot:
        """Rebuild the full timeline and projection.

        Use when the schedule or selected date changed. A missing schedule
        yields an empty timeline and no projection.
        """
        if schedule is None:
            return TrackingSnapshot(
                timeline=self.timeline_builder.build([], selected_date, now), projection=None
            )
        timeline = self.timeline_builder.build(schedule.stops, selected_date, now)
        return TrackingSnapshot(
            timeline=timeline,
            projection=self._project(schedule, timeline, now, segments),
        )

    def refresh(
        self,
        previous: TrackingSnapshot,
        schedule: TrainSchedule | None,
        selected_date: date,
        now: datetime,
        segments: Sequence[Segment] | None = None,
    ) -> TrackingSnapshot:
        """Recompute states, progress and projection for a tick without re-resolving stops."""
        timeline = self.timeline_builder.refresh(previous.timeline, selected_date, now)
        projection = self._project(schedule, timeline, now, segments) if schedule else None
        return TrackingSnapshot(timeline=timeline, projection=projection)

    def _project(
        self,
        schedule: TrainSchedule,
        timeline: Timeline,
        now: datetime,
        segments: Sequence[Segment] | None,
    ) -> ProjectedTrain | None:
        if timeline.phase is JourneyPhase.FUTURE_DAY:
            return None

        journey_segments = (
            list(segments)
            if segments
            else segments_from_resolved_stops([item.stop_ref for item in timeline.items])
        )
        journey = TrainJourney(
            id=schedule.train_id,
            code=schedule.train_code,
            name=schedule.train_name,
            segments=journey_segments,
        )
        return self.projector.project(journey, now)

    @staticmethod
    def alarm_window(
        snapshot: TrackingSnapshot, destination_station_id: str | None = None
    ) -> tuple[datetime, datetime] | None:
        """Return (departure, arrival) used for alarm decisions.

        Arrival is taken at the destination station when given, otherwise at
        the last stop.
        """
        stops = [item.stop_ref for item in snapshot.items]
        departure = first_departure(stops)
        candidates = (
            [s for s in stops if s.station_id == destination_station_id]
            if destination_station_id
            else stops[-1:]
        )
        arrival = candidates[0].earliest_time if candidates else None
        if departure is None or arrival is None:
            return None
        return departure, arrival

    def validate_alarm(
        self,
        snapshot: TrackingSnapshot,
        offset_minutes: int,
        now: datetime,
        destination_station_id: str | None = None,
    ) -> AlarmValidationResult | None:
        """Validate an alarm offset against the snapshot's journey, or None without times."""
        window = self.alarm_window(snapshot, destination_station_id)
        if window is None:
            logger.debug("No departure/arrival available for alarm validation")
            return None
        departure, arrival = window
        return validate_alarm_timing(offset_minutes, departure, arrival, now)
