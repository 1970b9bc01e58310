"""Domain layer - journey models, ports and contracts."""

from journey_tracker.domain.models import (
    JourneyPhase,
    ProjectedTrain,
    ResolvedStop,
    Segment,
    Station,
    Stop,
    TimelineItem,
)
from journey_tracker.domain.ports import (
    AlarmScheduler,
    JourneyRepository,
    ScheduleRepository,
)

__all__ = [
    "AlarmScheduler",
    "JourneyPhase",
    "JourneyRepository",
    "ProjectedTrain",
    "ResolvedStop",
    "ScheduleRepository",
    "Segment",
    "Station",
    "Stop",
    "TimelineItem",
]
