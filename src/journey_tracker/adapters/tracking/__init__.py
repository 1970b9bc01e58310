"""Live tracking adapters: refresh loop and tracking state."""

from journey_tracker.adapters.tracking.refresh_loop import LiveRefreshLoop
from journey_tracker.adapters.tracking.state import TrackingState
from journey_tracker.adapters.tracking.state_updater import StateUpdater

__all__ = ["LiveRefreshLoop", "StateUpdater", "TrackingState"]
