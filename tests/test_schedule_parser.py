"""Tests for ScheduleParser."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from journey_tracker.adapters.backend_api.schedule_parser import ScheduleParser
from journey_tracker.domain.models import Position

JAKARTA = ZoneInfo("Asia/Jakarta")


def test_parse_schedule_orders_stops_and_drops_invalid_entries() -> None:
    """Given unordered stops, when parsing, then they are sorted and invalid ones skipped."""
    data = {
        "trainCode": "7",
        "trainName": "Argo Parahyangan",
        "trainId": "train-7",
        "route": {"origin": "Gambir", "destination": "Bandung"},
        "totalStops": 3,
        "stops": [
            {"sequence": 2, "stationId": "bd", "stationCode": "BD", "arrivalTime": "10:00:00"},
            {"sequence": 1, "stationId": "gmr", "stationCode": "GMR", "departureTime": "07:00:00",
             "arrivalTime": "", "isOrigin": True},
            {"sequence": 3, "stationCode": "XX"},
            "not a stop",
        ],
    }

    schedule = ScheduleParser.parse_schedule(data)

    assert schedule is not None
    assert schedule.train_code == "7"
    assert schedule.route.destination == "Bandung"
    assert schedule.total_stops == 3
    assert [s.station_id for s in schedule.stops] == ["gmr", "bd"]
    assert schedule.stops[0].arrival_time_of_day is None
    assert schedule.stops[0].departure_time_of_day == "07:00:00"
    assert schedule.stops[0].is_origin is True


def test_parse_schedule_without_object_returns_none() -> None:
    """Given a null value, when parsing a schedule, then None is returned."""
    assert ScheduleParser.parse_schedule(None) is None
    assert ScheduleParser.parse_schedule([]) is None


def test_parse_timestamp_accepts_epoch_millis_and_iso() -> None:
    """Given supported timestamp formats, when parsing, then results are aware and in the timezone."""
    epoch = ScheduleParser.parse_timestamp(0, JAKARTA)
    aware = ScheduleParser.parse_timestamp("2026-03-14T01:00:00+00:00", JAKARTA)
    naive = ScheduleParser.parse_timestamp("2026-03-14T08:00:00", JAKARTA)

    assert epoch == datetime(1970, 1, 1, tzinfo=UTC)
    assert epoch.tzinfo is JAKARTA
    assert aware == datetime(2026, 3, 14, 8, 0, tzinfo=JAKARTA)
    assert aware.utcoffset() == naive.utcoffset()
    assert naive == aware


def test_parse_timestamp_rejects_garbage() -> None:
    """Given unparsable values, when parsing, then None is returned."""
    assert ScheduleParser.parse_timestamp("yesterday", JAKARTA) is None
    assert ScheduleParser.parse_timestamp(True, JAKARTA) is None
    assert ScheduleParser.parse_timestamp(None, JAKARTA) is None


def test_parse_segments_sorts_and_skips_incomplete() -> None:
    """Given segments out of order, when parsing, then they are sorted by departure."""
    data = [
        {"fromStationId": "b", "toStationId": "c", "departure": "2026-03-14T09:05:00",
         "arrival": "2026-03-14T10:00:00", "routeId": "r1"},
        {"fromStationId": "a", "toStationId": "b", "departure": "2026-03-14T08:00:00",
         "arrival": "2026-03-14T09:00:00"},
        {"fromStationId": "c", "toStationId": "d", "departure": "2026-03-14T10:05:00"},
    ]

    segments = ScheduleParser.parse_segments(data, JAKARTA)

    assert [(s.from_station_id, s.to_station_id) for s in segments] == [("a", "b"), ("b", "c")]
    assert segments[0].route_id is None
    assert segments[1].route_id == "r1"
    assert segments[0].departure.tzinfo is not None


def test_parse_stations_skips_malformed_entries() -> None:
    """Given stations with missing ids or bad positions, when parsing, then only valid ones remain."""
    data = [
        {"id": "gmr", "code": "GMR", "name": "Gambir", "city": "Jakarta",
         "position": {"latitude": -6.1767, "longitude": 106.8306}},
        {"code": "XX"},
        {"id": "bad", "position": {"latitude": "north"}},
    ]

    stations = ScheduleParser.parse_stations(data)

    assert len(stations) == 1
    assert stations[0].position == Position(-6.1767, 106.8306)
    assert stations[0].city == "Jakarta"


def test_parse_routes_drops_points_without_coordinates() -> None:
    """Given a polyline with a broken point, when parsing, then that point is dropped."""
    data = [
        {"id": "r1", "name": "Gambir - Bandung", "path": [
            {"latitude": -6.0, "longitude": 107.0},
            {"latitude": None},
            {"latitude": -6.2, "longitude": 107.0},
        ]},
        {"name": "no id"},
    ]

    routes = ScheduleParser.parse_routes(data)

    assert len(routes) == 1
    assert routes[0].path == (Position(-6.0, 107.0), Position(-6.2, 107.0))


def test_parse_route_journeys() -> None:
    """Given a trains-by-route result, when parsing, then station info and sequences are kept."""
    data = [
        {
            "trainId": "train-7",
            "trainCode": "7",
            "trainName": "Argo Parahyangan",
            "departureStation": {"id": "gmr", "code": "GMR", "name": "Gambir", "city": "Jakarta"},
            "departureTime": "07:00:00",
            "departureSequence": 1,
            "arrivalStation": {"id": "bd", "code": "BD", "name": "Bandung", "city": "Bandung"},
            "arrivalTime": "10:00:00",
            "arrivalSequence": 4,
            "stopsBetween": 2,
        },
        {"trainCode": "no id"},
    ]

    journeys = ScheduleParser.parse_route_journeys(data)

    assert len(journeys) == 1
    assert journeys[0].departure_station.code == "GMR"
    assert journeys[0].arrival_sequence == 4
    assert journeys[0].stops_between == 2


def test_parse_projected_requires_position() -> None:
    """Given projected trains with and without position, when parsing, then only positioned ones remain."""
    data = [
        {"trainId": "train-7", "code": "7", "name": "Argo", "moving": True, "bearing": 180.0,
         "position": {"latitude": -6.05, "longitude": 107.0},
         "segmentDeparture": "2026-03-14T08:00:00", "progress": 0.5},
        {"trainId": "train-9", "code": "9"},
    ]

    trains = ScheduleParser.parse_projected(data, JAKARTA)

    assert len(trains) == 1
    assert trains[0].moving is True
    assert trains[0].segment_departure == datetime(2026, 3, 14, 8, 0, tzinfo=JAKARTA)
    assert trains[0].from_station is None
