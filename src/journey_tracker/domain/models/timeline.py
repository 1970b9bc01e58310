"""Timeline and tracking snapshot domain models."""

from dataclasses import dataclass

from journey_tracker.domain.models.journey_phase import JourneyPhase
from journey_tracker.domain.models.projected_train import ProjectedTrain
from journey_tracker.domain.models.timeline_item import StopState, TimelineItem


@dataclass(frozen=True)
class Timeline:
    """Timeline items together with the phase they were computed for."""

    phase: JourneyPhase
    items: list[TimelineItem]

    @property
    def current_item(self) -> TimelineItem | None:
        """The item the train is currently at or departing from."""
        return next((item for item in self.items if item.state is StopState.CURRENT), None)


@dataclass(frozen=True)
class TrackingSnapshot:
    """Derived state of a journey at one instant."""

    timeline: Timeline
    projection: ProjectedTrain | None

    @property
    def phase(self) -> JourneyPhase:
        """Journey phase the snapshot was computed for."""
        return self.timeline.phase

    @property
    def items(self) -> list[TimelineItem]:
        """Timeline items in stop order."""
        return self.timeline.items
