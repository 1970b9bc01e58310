"""Protocol for updating tracking state."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from journey_tracker.domain.models.error_details import ErrorDetails
    from journey_tracker.domain.models.journey_phase import JourneyPhase
    from journey_tracker.domain.models.projected_train import ProjectedTrain
    from journey_tracker.domain.models.timeline_item import TimelineItem


class StateUpdaterProtocol(Protocol):
    """Protocol for writing derived tracking state."""

    def is_selected(self, session_id: str) -> bool:
        """Return whether the given session is still the selected one."""
        ...

    def update_timeline(self, items: list["TimelineItem"], phase: "JourneyPhase") -> None:
        """Replace the timeline items and journey phase."""
        ...

    def update_projection(self, projection: "ProjectedTrain | None") -> None:
        """Replace the projected train snapshot."""
        ...

    def update_api_status(self, status: str, error: "ErrorDetails | None" = None) -> None:
        """Update the upstream status ("success" or "error") and the error shown to the user."""
        ...

    def update_last_update_time(self, time: "datetime") -> None:
        """Update the timestamp of the last successful tick."""
        ...
