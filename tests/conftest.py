"""Shared fixtures for journey tracker tests."""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from journey_tracker.domain.models import (
    Position,
    RouteInfo,
    Station,
    Stop,
    TrainSchedule,
)

from factories import make_stop

JAKARTA = ZoneInfo("Asia/Jakarta")


@pytest.fixture
def tz() -> ZoneInfo:
    """Timezone used for schedule wall-clock times."""
    return JAKARTA


@pytest.fixture
def travel_day() -> date:
    """Selected date used across tests."""
    return date(2026, 3, 14)


@pytest.fixture
def day_stops() -> list[Stop]:
    """A daytime journey: A 08:00 -> B 09:00/09:05 -> C 10:00."""
    return [
        make_stop(1, "a", departure="08:00:00"),
        make_stop(2, "b", arrival="09:00:00", departure="09:05:00"),
        make_stop(3, "c", arrival="10:00:00"),
    ]


@pytest.fixture
def overnight_stops() -> list[Stop]:
    """An overnight journey: A 23:50 -> B 00:15/00:20 -> C 01:40."""
    return [
        make_stop(1, "a", departure="23:50:00"),
        make_stop(2, "b", arrival="00:15:00", departure="00:20:00"),
        make_stop(3, "c", arrival="01:40:00"),
    ]


@pytest.fixture
def day_schedule(day_stops: list[Stop]) -> TrainSchedule:
    """Schedule wrapping the daytime journey."""
    return TrainSchedule(
        train_code="7",
        train_name="Argo Parahyangan",
        train_id="train-7",
        route=RouteInfo(origin="Station A", destination="Station C"),
        total_stops=len(day_stops),
        stops=day_stops,
    )


@pytest.fixture
def stations() -> list[Station]:
    """Stations A, B and C on a north-south line, about 11 km apart."""
    return [
        Station(id="a", code="A", name="Station A", position=Position(-6.0, 107.0)),
        Station(id="b", code="B", name="Station B", position=Position(-6.1, 107.0)),
        Station(id="c", code="C", name="Station C", position=Position(-6.2, 107.0)),
    ]


@pytest.fixture
def at(tz: ZoneInfo, travel_day: date):
    """Return a factory building aware datetimes on the travel day (or a day offset)."""

    def _at(hour: int, minute: int = 0, day_offset: int = 0) -> datetime:
        moment = datetime.combine(travel_day, time(hour, minute), tzinfo=tz)
        return moment + timedelta(days=day_offset)

    return _at
