"""Tracking engine port."""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Protocol

from journey_tracker.domain.models.alarm_validation import AlarmValidationResult
from journey_tracker.domain.models.segment import Segment
from journey_tracker.domain.models.timeline import TrackingSnapshot
from journey_tracker.domain.models.train_schedule import TrainSchedule


class TrackingEngine(Protocol):
    """Port for computing a journey's timeline and projected position."""

    def recompute(
        self,
        schedule: TrainSchedule | None,
        selected_date: date,
        now: datetime,
        segments: Sequence[Segment] | None = None,
    ) -> TrackingSnapshot:
        """Rebuild the full snapshot after a schedule or selected-date change.

        Args:
            schedule: The train schedule, or None while it is unavailable.
            selected_date: Calendar day the user is tracking.
            now: Current instant.
            segments: Optional explicit journey segments.

        Returns:
            Snapshot with timeline and projection.
        """
        ...

    def refresh(
        self,
        previous: TrackingSnapshot,
        schedule: TrainSchedule | None,
        selected_date: date,
        now: datetime,
        segments: Sequence[Segment] | None = None,
    ) -> TrackingSnapshot:
        """Update states, progress and projection for a tick, reusing resolved stops."""
        ...

    def alarm_window(
        self, snapshot: TrackingSnapshot, destination_station_id: str | None = None
    ) -> tuple[datetime, datetime] | None:
        """Return the (departure, arrival) pair used for alarm decisions."""
        ...

    def validate_alarm(
        self,
        snapshot: TrackingSnapshot,
        offset_minutes: int,
        now: datetime,
        destination_station_id: str | None = None,
    ) -> AlarmValidationResult | None:
        """Validate an alarm offset against the snapshot's journey."""
        ...
