"""Projection of a train's live position along its journey."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from journey_tracker.application.progress import interpolate_progress
from journey_tracker.domain.geo import haversine_distance_m, initial_bearing_deg
from journey_tracker.domain.models.projected_train import ProjectedTrain
from journey_tracker.domain.models.segment import Segment, TrainJourney
from journey_tracker.domain.models.station import Position, Station

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from journey_tracker.domain.models.route import Route
    from journey_tracker.domain.models.stop import ResolvedStop

logger = logging.getLogger(__name__)

# Look-ahead distance along the route used to sample the heading, in meters
BEARING_SAMPLE_M = 20.0
MIN_BEARING_SAMPLE_M = 5.0


def build_station_lookup(stations: Iterable[Station]) -> dict[str, Station]:
    """Index stations by id and by code. Ids win over codes on collision."""
    lookup: dict[str, Station] = {}
    for station in stations:
        lookup.setdefault(station.code, station)
    for station in stations:
        lookup[station.id] = station
    return lookup


def segments_from_resolved_stops(stops: Sequence[ResolvedStop]) -> list[Segment]:
    """Derive travel segments from consecutive resolved stops.

    Stop pairs missing a departure or arrival time are skipped.
    """
    segments: list[Segment] = []
    for current, following in zip(stops, stops[1:], strict=False):
        departure = current.resolved_departure or current.resolved_arrival
        arrival = following.resolved_arrival or following.resolved_departure
        if departure is None or arrival is None:
            continue
        segments.append(
            Segment(
                from_station_id=current.station_id,
                to_station_id=following.station_id,
                departure=departure,
                arrival=arrival,
            )
        )
    return segments


def leg_indices(segments: Sequence[Segment], from_id: str, to_id: str) -> tuple[int, int] | None:
    """Return (start, end) segment indices of the contiguous leg from `from_id` to `to_id`."""
    start = next((i for i, seg in enumerate(segments) if seg.from_station_id == from_id), None)
    if start is None:
        return None
    for end in range(start, len(segments)):
        if segments[end].to_station_id == to_id:
            return start, end
    return None


def stop_station_ids(segments: Sequence[Segment], dwell_seconds: float = 30) -> list[str]:
    """Station ids where the train actually stops.

    Intermediate stations count as stops when the train dwells there for at
    least `dwell_seconds`. The first origin and last destination always count.
    """
    if not segments:
        return []

    stops = [segments[0].from_station_id]
    for previous, following in zip(segments, segments[1:], strict=False):
        if previous.to_station_id != following.from_station_id:
            continue
        dwell = (following.departure - previous.arrival).total_seconds()
        if dwell >= dwell_seconds:
            stops.append(previous.to_station_id)
    stops.append(segments[-1].to_station_id)

    return list(dict.fromkeys(stops))


def _lerp(origin: Position, destination: Position, t: float) -> Position:
    return Position(
        latitude=origin.latitude + (destination.latitude - origin.latitude) * t,
        longitude=origin.longitude + (destination.longitude - origin.longitude) * t,
    )


def _bearing(origin: Position | None, destination: Position | None) -> float | None:
    if origin is None or destination is None:
        return None
    return initial_bearing_deg(
        origin.latitude, origin.longitude, destination.latitude, destination.longitude
    )


def _distance_m(a: Position, b: Position) -> float:
    return haversine_distance_m(a.latitude, a.longitude, b.latitude, b.longitude)


def _speed_kph(distance_m: float, segment: Segment) -> float | None:
    duration_s = (segment.arrival - segment.departure).total_seconds()
    if duration_s <= 0:
        return None
    return (distance_m / 1000) / (duration_s / 3600)


def is_route_reversed(route: Route, from_station: Station, to_station: Station) -> bool:
    """Whether the route polyline runs from the arrival station towards the departure station."""
    start, end = route.path[0], route.path[-1]
    forward = _distance_m(start, from_station.position) + _distance_m(end, to_station.position)
    backward = _distance_m(end, from_station.position) + _distance_m(start, to_station.position)
    return backward < forward


class TrainPositionProjector:
    """Maps a journey and the current instant to a projected train snapshot."""

    def __init__(
        self,
        stations_by_id: Mapping[str, Station],
        routes_by_id: Mapping[str, Route] | None = None,
    ) -> None:
        """Initialize with explicit station and route lookups.

        Args:
            stations_by_id: Stations keyed by id (and optionally by code).
            routes_by_id: Route polylines keyed by route id.
        """
        self.stations_by_id = stations_by_id
        self.routes_by_id = routes_by_id or {}

    def active_segment(
        self, segments: Sequence[Segment], now: datetime
    ) -> tuple[Segment, bool, float] | None:
        """Pick the segment relevant at `now`.

        Returns (segment, moving, progress) or None if nothing matches.
        """
        if not segments:
            return None

        first, last = segments[0], segments[-1]
        if now < first.departure:
            return first, False, 0.0
        if now >= last.arrival:
            return last, False, 1.0

        for segment in segments:
            if segment.departure <= now < segment.arrival:
                progress = interpolate_progress(segment.departure, segment.arrival, now)
                return segment, True, progress if progress is not None else 0.0

        # Dwelling at a station between two segments
        for previous, following in zip(segments, segments[1:], strict=False):
            if previous.arrival <= now < following.departure:
                return following, False, 0.0

        return None

    def project(self, journey: TrainJourney, now: datetime) -> ProjectedTrain | None:
        """Project the train's position at `now`.

        Returns None when no segment or station can be resolved.
        """
        picked = self.active_segment(journey.segments, now)
        if picked is None:
            logger.debug(f"No active segment for train {journey.code} at {now.isoformat()}")
            return None

        segment, moving, progress = picked
        from_station = self.stations_by_id.get(segment.from_station_id)
        to_station = self.stations_by_id.get(segment.to_station_id) or from_station

        base = {
            "id": journey.id,
            "code": journey.code,
            "name": journey.name,
            "from_station": from_station,
            "to_station": to_station,
            "segment_departure": segment.departure,
            "segment_arrival": segment.arrival,
            "progress": progress,
            "journey_departure": journey.segments[0].departure,
            "journey_arrival": journey.segments[-1].arrival,
        }
        station_bearing = _bearing(
            from_station.position if from_station else None,
            to_station.position if to_station else None,
        )

        if not moving:
            station = to_station if progress >= 1.0 else from_station
            if station is None:
                logger.warning(f"Station {segment.from_station_id} not found for {journey.code}")
                return None
            return ProjectedTrain(
                position=station.position, moving=False, bearing=station_bearing, **base
            )

        route = self.routes_by_id.get(segment.route_id) if segment.route_id else None
        if route is not None and route.path:
            projected = self._project_on_route(route, segment, progress, from_station, to_station)
            if projected is not None:
                position, bearing, speed = projected
                return ProjectedTrain(
                    position=position,
                    moving=True,
                    bearing=bearing if bearing is not None else station_bearing,
                    speed_kph=speed,
                    route_id=route.id,
                    **base,
                )

        if from_station is None or to_station is None:
            logger.warning(
                f"Cannot interpolate {journey.code}: stations "
                f"{segment.from_station_id} -> {segment.to_station_id} not resolvable"
            )
            return None

        return ProjectedTrain(
            position=_lerp(from_station.position, to_station.position, progress),
            moving=True,
            bearing=station_bearing,
            speed_kph=_speed_kph(_distance_m(from_station.position, to_station.position), segment),
            **base,
        )

    def _project_on_route(
        self,
        route: Route,
        segment: Segment,
        progress: float,
        from_station: Station | None,
        to_station: Station | None,
    ) -> tuple[Position, float | None, float | None] | None:
        reversed_route = (
            from_station is not None
            and to_station is not None
            and is_route_reversed(route, from_station, to_station)
        )

        length = route.total_length_m
        travelled = length * progress
        distance = length - travelled if reversed_route else travelled
        position = route.coordinate_at(distance)
        if position is None:
            return None

        # Sample closer to the current point near the ends so the heading stays on the route
        factor = min(progress, 1.0 - progress) * 2.0
        delta = max(MIN_BEARING_SAMPLE_M, min(BEARING_SAMPLE_M * factor, BEARING_SAMPLE_M))
        ahead = distance - delta if reversed_route else distance + delta
        neighbor = route.coordinate_at(ahead)
        bearing = _bearing(position, neighbor)

        return position, bearing, _speed_kph(length, segment)
