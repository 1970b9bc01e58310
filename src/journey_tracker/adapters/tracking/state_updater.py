"""Updater for tracking state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from journey_tracker.adapters.tracking.state import (
    TrackingState,  # noqa: TC001 - Runtime dependency: used in __init__
)
from journey_tracker.domain.contracts.state_updater import StateUpdaterProtocol

if TYPE_CHECKING:
    from datetime import datetime

    from journey_tracker.domain.models.error_details import ErrorDetails
    from journey_tracker.domain.models.journey_phase import JourneyPhase
    from journey_tracker.domain.models.projected_train import ProjectedTrain
    from journey_tracker.domain.models.timeline_item import TimelineItem

logger = logging.getLogger(__name__)


class StateUpdater(StateUpdaterProtocol):
    """Updates tracking state for the selected session."""

    def __init__(self, tracking_state: TrackingState) -> None:
        """Initialize the state updater.

        Args:
            tracking_state: The TrackingState instance to update.
        """
        self.tracking_state = tracking_state

    def select(self, session_id: str) -> None:
        """Make a session the selected one and clear state from any previous session."""
        if self.tracking_state.selected_session_id != session_id:
            self.tracking_state.timeline = []
            self.tracking_state.projection = None
            self.tracking_state.phase = None
            self.tracking_state.error = None
            self.tracking_state.api_status = "unknown"
        self.tracking_state.selected_session_id = session_id
        logger.debug(f"Selected session: {session_id}")

    def clear_selection(self, session_id: str) -> None:
        """Deselect a session if it is the selected one."""
        if self.tracking_state.selected_session_id == session_id:
            self.tracking_state.selected_session_id = None
            logger.debug(f"Cleared selection of session: {session_id}")

    def is_selected(self, session_id: str) -> bool:
        """Return whether the session is still selected."""
        return self.tracking_state.selected_session_id == session_id

    def update_timeline(self, items: list[TimelineItem], phase: JourneyPhase) -> None:
        """Replace the timeline items and phase.

        Args:
            items: Timeline items in stop order.
            phase: Journey phase they were computed for.
        """
        self.tracking_state.timeline = items
        self.tracking_state.phase = phase
        logger.debug(f"Updated timeline: {len(items)} items, phase {phase.value}")

    def update_projection(self, projection: ProjectedTrain | None) -> None:
        """Replace the projected train snapshot.

        Args:
            projection: The new projection, or None when the train is not projectable.
        """
        self.tracking_state.projection = projection

    def update_api_status(self, status: str, error: ErrorDetails | None = None) -> None:
        """Update the upstream status in the state.

        Args:
            status: The API status ("success" or "error").
            error: Details of the failure, cleared on success.
        """
        self.tracking_state.api_status = status
        self.tracking_state.error = error
        logger.debug(f"Updated API status: {status}")

    def update_last_update_time(self, time: datetime) -> None:
        """Update the last update timestamp in the state.

        Args:
            time: The timestamp of the last update.
        """
        self.tracking_state.last_update = time
