"""Segment and journey domain models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Segment:
    """Travel interval between two consecutive stops."""

    from_station_id: str
    to_station_id: str
    departure: datetime
    arrival: datetime
    route_id: str | None = None


@dataclass(frozen=True)
class TrainJourney:
    """The full ordered set of segments for one train trip."""

    id: str
    code: str
    name: str
    segments: list[Segment] = field(default_factory=list)
