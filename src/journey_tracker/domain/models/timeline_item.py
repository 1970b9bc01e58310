"""Timeline item domain model."""

from dataclasses import dataclass
from enum import Enum

from journey_tracker.domain.models.stop import ResolvedStop


class StopState(str, Enum):
    """Display state of a stop in the journey timeline."""

    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class TimelineItem:
    """A stop in the journey timeline with its state and progress to the next stop."""

    stop_ref: ResolvedStop
    state: StopState
    progress_to_next: float | None = None

    @property
    def station_id(self) -> str:
        """Station identifier of the referenced stop."""
        return self.stop_ref.station_id
