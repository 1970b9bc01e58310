"""Schedule source models returned by the backend."""

from dataclasses import dataclass, field

from journey_tracker.domain.models.stop import Stop


@dataclass(frozen=True)
class RouteInfo:
    """Origin and destination names of a train's full route."""

    origin: str
    destination: str


@dataclass(frozen=True)
class TrainSchedule:
    """Complete ordered stop list of one train."""

    train_code: str
    train_name: str
    train_id: str
    route: RouteInfo
    total_stops: int
    stops: list[Stop] = field(default_factory=list)


@dataclass(frozen=True)
class StationInfo:
    """Minimal station reference embedded in route search results."""

    id: str
    code: str
    name: str
    city: str


@dataclass(frozen=True)
class TrainRouteJourney:
    """A train that stops at both a departure and an arrival station, in that order."""

    train_id: str
    train_code: str
    train_name: str
    departure_station: StationInfo
    departure_time: str | None
    departure_sequence: int
    arrival_station: StationInfo
    arrival_time: str | None
    arrival_sequence: int
    stops_between: int
