"""Route polyline domain model."""

from __future__ import annotations

from dataclasses import dataclass, field

from journey_tracker.domain.geo import haversine_distance_m
from journey_tracker.domain.models.station import Position


@dataclass(frozen=True)
class Route:
    """A track geometry between stations, stored as an ordered polyline."""

    id: str
    name: str
    path: tuple[Position, ...]
    _cumulative_m: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        cumulative = [0.0]
        for previous, current in zip(self.path, self.path[1:], strict=False):
            cumulative.append(
                cumulative[-1]
                + haversine_distance_m(
                    previous.latitude, previous.longitude, current.latitude, current.longitude
                )
            )
        object.__setattr__(self, "_cumulative_m", tuple(cumulative))

    @property
    def total_length_m(self) -> float:
        """Length of the polyline in meters."""
        return self._cumulative_m[-1] if self.path else 0.0

    def coordinate_at(self, distance_m: float) -> Position | None:
        """Return the point `distance_m` meters along the polyline.

        The distance is clamped to the polyline length. Returns None for an empty path.
        """
        if not self.path:
            return None
        if len(self.path) == 1:
            return self.path[0]

        distance = max(0.0, min(distance_m, self.total_length_m))
        for index in range(1, len(self._cumulative_m)):
            end = self._cumulative_m[index]
            if distance <= end:
                start = self._cumulative_m[index - 1]
                span = end - start
                t = 0.0 if span <= 0 else (distance - start) / span
                a = self.path[index - 1]
                b = self.path[index]
                return Position(
                    latitude=a.latitude + (b.latitude - a.latitude) * t,
                    longitude=a.longitude + (b.longitude - a.longitude) * t,
                )
        return self.path[-1]
