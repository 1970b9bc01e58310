"""Parser for backend schedule and journey responses."""

import logging
from datetime import datetime, tzinfo
from typing import Any

from journey_tracker.domain.models import (
    Position,
    ProjectedTrain,
    Route,
    RouteInfo,
    Segment,
    Station,
    StationInfo,
    Stop,
    TrainRouteJourney,
    TrainSchedule,
)

logger = logging.getLogger(__name__)


class ScheduleParser:
    """Parses backend query values into domain models."""

    @staticmethod
    def _optional_str(value: Any) -> str | None:
        return str(value) if value not in (None, "") else None

    @staticmethod
    def parse_stop(data: dict[str, Any]) -> Stop | None:
        """Parse one stop entry. Returns None when the station id is missing."""
        station_id = data.get("stationId")
        if not station_id:
            return None
        return Stop(
            sequence=int(data.get("sequence", 0)),
            station_id=str(station_id),
            station_code=str(data.get("stationCode", "")),
            station_name=str(data.get("stationName", "")),
            city=str(data.get("city", "")),
            arrival_time_of_day=ScheduleParser._optional_str(data.get("arrivalTime")),
            departure_time_of_day=ScheduleParser._optional_str(data.get("departureTime")),
            is_origin=bool(data.get("isOrigin", False)),
            is_destination=bool(data.get("isDestination", False)),
        )

    @staticmethod
    def parse_schedule(data: Any) -> TrainSchedule | None:
        """Parse a train schedule. Returns None for an empty or malformed value."""
        if not isinstance(data, dict):
            return None

        raw_stops = data.get("stops", [])
        stops = [
            stop
            for stop in (
                ScheduleParser.parse_stop(s) for s in raw_stops if isinstance(s, dict)
            )
            if stop is not None
        ]
        stops.sort(key=lambda s: s.sequence)

        route = data.get("route") or {}
        return TrainSchedule(
            train_code=str(data.get("trainCode", "")),
            train_name=str(data.get("trainName", "")),
            train_id=str(data.get("trainId", "")),
            route=RouteInfo(
                origin=str(route.get("origin", "")),
                destination=str(route.get("destination", "")),
            ),
            total_stops=int(data.get("totalStops", len(stops))),
            stops=stops,
        )

    @staticmethod
    def _parse_station_info(data: Any) -> StationInfo:
        data = data if isinstance(data, dict) else {}
        return StationInfo(
            id=str(data.get("id", "")),
            code=str(data.get("code", "")),
            name=str(data.get("name", "")),
            city=str(data.get("city", "")),
        )

    @staticmethod
    def parse_route_journeys(data: Any) -> list[TrainRouteJourney]:
        """Parse the trains-by-route result list."""
        if not isinstance(data, list):
            return []

        journeys = []
        for item in data:
            if not isinstance(item, dict) or not item.get("trainId"):
                continue
            journeys.append(
                TrainRouteJourney(
                    train_id=str(item["trainId"]),
                    train_code=str(item.get("trainCode", "")),
                    train_name=str(item.get("trainName", "")),
                    departure_station=ScheduleParser._parse_station_info(
                        item.get("departureStation")
                    ),
                    departure_time=ScheduleParser._optional_str(item.get("departureTime")),
                    departure_sequence=int(item.get("departureSequence", 0)),
                    arrival_station=ScheduleParser._parse_station_info(item.get("arrivalStation")),
                    arrival_time=ScheduleParser._optional_str(item.get("arrivalTime")),
                    arrival_sequence=int(item.get("arrivalSequence", 0)),
                    stops_between=int(item.get("stopsBetween", 0)),
                )
            )
        return journeys

    @staticmethod
    def parse_timestamp(value: Any, tz: tzinfo | None = None) -> datetime | None:
        """Parse epoch milliseconds or an ISO 8601 string.

        Naive ISO values are interpreted in `tz`; all results are converted to `tz`.
        """
        if value is None or isinstance(value, bool):
            return None
        try:
            if isinstance(value, (int, float)):
                moment = datetime.fromtimestamp(value / 1000, tz=tz)
            else:
                moment = datetime.fromisoformat(str(value))
                if moment.tzinfo is None:
                    moment = moment.replace(tzinfo=tz)
        except (ValueError, OverflowError, OSError):
            logger.debug(f"Unparsable timestamp: {value!r}")
            return None
        return moment.astimezone(tz) if tz is not None and moment.tzinfo else moment

    @staticmethod
    def parse_segments(data: Any, tz: tzinfo | None = None) -> list[Segment]:
        """Parse journey segments, dropping entries without both timestamps."""
        if not isinstance(data, list):
            return []

        segments = []
        for item in data:
            if not isinstance(item, dict):
                continue
            departure = ScheduleParser.parse_timestamp(item.get("departure"), tz)
            arrival = ScheduleParser.parse_timestamp(item.get("arrival"), tz)
            if departure is None or arrival is None:
                logger.warning(f"Skipping segment without timestamps: {item}")
                continue
            segments.append(
                Segment(
                    from_station_id=str(item.get("fromStationId", "")),
                    to_station_id=str(item.get("toStationId", "")),
                    departure=departure,
                    arrival=arrival,
                    route_id=ScheduleParser._optional_str(item.get("routeId")),
                )
            )
        segments.sort(key=lambda s: s.departure)
        return segments

    @staticmethod
    def parse_station(data: Any) -> Station | None:
        """Parse a station with its position."""
        if not isinstance(data, dict) or not data.get("id"):
            return None
        position = data.get("position") or {}
        try:
            latitude = float(position.get("latitude", 0.0))
            longitude = float(position.get("longitude", 0.0))
        except (TypeError, ValueError):
            return None
        return Station(
            id=str(data["id"]),
            code=str(data.get("code", data["id"])),
            name=str(data.get("name", "")),
            position=Position(latitude=latitude, longitude=longitude),
            city=ScheduleParser._optional_str(data.get("city")),
        )

    @staticmethod
    def parse_stations(data: Any) -> list[Station]:
        """Parse the station list, skipping malformed entries."""
        if not isinstance(data, list):
            return []
        return [s for s in (ScheduleParser.parse_station(item) for item in data) if s is not None]

    @staticmethod
    def parse_routes(data: Any) -> list[Route]:
        """Parse route polylines. Points without numeric coordinates are dropped."""
        if not isinstance(data, list):
            return []

        routes = []
        for item in data:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            path = []
            for point in item.get("path") or []:
                try:
                    path.append(
                        Position(
                            latitude=float(point["latitude"]), longitude=float(point["longitude"])
                        )
                    )
                except (KeyError, TypeError, ValueError):
                    continue
            routes.append(
                Route(id=str(item["id"]), name=str(item.get("name", "")), path=tuple(path))
            )
        return routes

    @staticmethod
    def parse_projected(data: Any, tz: tzinfo | None = None) -> list[ProjectedTrain]:
        """Parse projected train snapshots for a station pair."""
        if not isinstance(data, list):
            return []

        trains = []
        for item in data:
            if not isinstance(item, dict):
                continue
            position = item.get("position") or {}
            try:
                latitude = float(position["latitude"])
                longitude = float(position["longitude"])
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping projected train without position: {item.get('trainId')}")
                continue
            trains.append(
                ProjectedTrain(
                    id=str(item.get("trainId", item.get("id", ""))),
                    code=str(item.get("code", "")),
                    name=str(item.get("name", "")),
                    position=Position(latitude=latitude, longitude=longitude),
                    moving=bool(item.get("moving", False)),
                    bearing=item.get("bearing"),
                    speed_kph=item.get("speedKph"),
                    route_id=ScheduleParser._optional_str(item.get("routeIdentifier")),
                    from_station=ScheduleParser.parse_station(item.get("fromStation")),
                    to_station=ScheduleParser.parse_station(item.get("toStation")),
                    segment_departure=ScheduleParser.parse_timestamp(
                        item.get("segmentDeparture"), tz
                    ),
                    segment_arrival=ScheduleParser.parse_timestamp(item.get("segmentArrival"), tz),
                    progress=item.get("progress"),
                    journey_departure=ScheduleParser.parse_timestamp(
                        item.get("journeyDeparture"), tz
                    ),
                    journey_arrival=ScheduleParser.parse_timestamp(item.get("journeyArrival"), tz),
                )
            )
        return trains
