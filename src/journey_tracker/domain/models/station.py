"""Station and geographic position domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A WGS84 coordinate in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Station:
    """Represents a railway station."""

    id: str
    code: str
    name: str
    position: Position
    city: str | None = None
