"""Projected train domain model."""

from dataclasses import dataclass
from datetime import datetime

from journey_tracker.domain.models.station import Position, Station


@dataclass(frozen=True)
class ProjectedTrain:
    """Snapshot of where a train is expected to be at a given instant."""

    id: str
    code: str
    name: str
    position: Position
    moving: bool
    bearing: float | None = None
    speed_kph: float | None = None
    route_id: str | None = None
    from_station: Station | None = None
    to_station: Station | None = None
    segment_departure: datetime | None = None
    segment_arrival: datetime | None = None
    progress: float | None = None
    journey_departure: datetime | None = None
    journey_arrival: datetime | None = None
