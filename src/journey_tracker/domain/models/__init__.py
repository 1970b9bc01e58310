"""Domain models for journey tracking."""

from journey_tracker.domain.models.alarm_metadata import AlarmMetadata
from journey_tracker.domain.models.alarm_scheduling_error import AlarmSchedulingError
from journey_tracker.domain.models.alarm_validation import (
    AlarmFailureReason,
    AlarmValidationResult,
)
from journey_tracker.domain.models.error_details import ErrorDetails
from journey_tracker.domain.models.journey_phase import JourneyPhase, PhasePolicy
from journey_tracker.domain.models.projected_train import ProjectedTrain
from journey_tracker.domain.models.route import Route
from journey_tracker.domain.models.segment import Segment, TrainJourney
from journey_tracker.domain.models.station import Position, Station
from journey_tracker.domain.models.stop import ResolvedStop, Stop
from journey_tracker.domain.models.timeline import Timeline, TrackingSnapshot
from journey_tracker.domain.models.timeline_item import StopState, TimelineItem
from journey_tracker.domain.models.tracking_session import TrackingSession
from journey_tracker.domain.models.train_schedule import (
    RouteInfo,
    StationInfo,
    TrainRouteJourney,
    TrainSchedule,
)

__all__ = [
    "AlarmFailureReason",
    "AlarmMetadata",
    "AlarmSchedulingError",
    "AlarmValidationResult",
    "ErrorDetails",
    "JourneyPhase",
    "PhasePolicy",
    "Position",
    "ProjectedTrain",
    "ResolvedStop",
    "Route",
    "RouteInfo",
    "Segment",
    "Station",
    "StationInfo",
    "Stop",
    "StopState",
    "Timeline",
    "TimelineItem",
    "TrackingSession",
    "TrackingSnapshot",
    "TrainJourney",
    "TrainRouteJourney",
    "TrainSchedule",
]
