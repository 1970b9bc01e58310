"""Tracking state dataclass."""

from dataclasses import dataclass, field
from datetime import datetime

from journey_tracker.domain.models.error_details import ErrorDetails
from journey_tracker.domain.models.journey_phase import JourneyPhase
from journey_tracker.domain.models.projected_train import ProjectedTrain
from journey_tracker.domain.models.timeline_item import TimelineItem


@dataclass
class TrackingState:
    """State presented for the selected tracking session."""

    selected_session_id: str | None = None
    phase: JourneyPhase | None = None
    timeline: list[TimelineItem] = field(default_factory=list)
    projection: ProjectedTrain | None = None
    last_update: datetime | None = None
    api_status: str = "unknown"
    error: ErrorDetails | None = None

    @property
    def error_message(self) -> str | None:
        """User-facing message for the last upstream failure."""
        if self.error is None:
            return None
        suffix = " Retrying automatically." if self.error.retryable else ""
        return f"Could not load the train schedule: {self.error.reason}.{suffix}"
