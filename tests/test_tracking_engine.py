"""Tests for the journey tracking engine."""

from collections.abc import Callable
from datetime import date, datetime, timedelta

import pytest

from journey_tracker.application.tracking_engine import JourneyTrackingEngine
from journey_tracker.application.train_projector import build_station_lookup
from journey_tracker.domain.models import (
    AlarmFailureReason,
    JourneyPhase,
    Segment,
    Station,
    StopState,
    TrainSchedule,
)


@pytest.fixture
def engine(stations: list[Station]) -> JourneyTrackingEngine:
    """Engine with stations A, B and C."""
    return JourneyTrackingEngine(build_station_lookup(stations))


def test_recompute_derives_segments_from_stops(
    engine: JourneyTrackingEngine,
    day_schedule: TrainSchedule,
    travel_day: date,
    at: Callable[..., datetime],
) -> None:
    """Given a schedule without segments, when recomputing mid-leg, then position follows the stop times."""
    snapshot = engine.recompute(day_schedule, travel_day, at(8, 30))

    assert snapshot.phase is JourneyPhase.EN_ROUTE
    assert snapshot.items[0].state is StopState.CURRENT
    projection = snapshot.projection
    assert projection is not None
    assert projection.moving is True
    assert projection.progress == pytest.approx(0.5)
    assert projection.position.latitude == pytest.approx(-6.05)
    assert projection.code == "7"


def test_recompute_uses_explicit_segments(
    engine: JourneyTrackingEngine,
    day_schedule: TrainSchedule,
    travel_day: date,
    at: Callable[..., datetime],
) -> None:
    """Given explicit segments, when recomputing, then they take precedence over stop times."""
    segments = [Segment("a", "c", at(8), at(10))]

    snapshot = engine.recompute(day_schedule, travel_day, at(9), segments)

    assert snapshot.projection.from_station.id == "a"
    assert snapshot.projection.to_station.id == "c"
    assert snapshot.projection.position.latitude == pytest.approx(-6.1)
    assert snapshot.projection.position.longitude == pytest.approx(107.0)


def test_recompute_is_idempotent(
    engine: JourneyTrackingEngine,
    day_schedule: TrainSchedule,
    travel_day: date,
    at: Callable[..., datetime],
) -> None:
    """Given identical inputs, when recomputing twice, then the snapshots are equal."""
    first = engine.recompute(day_schedule, travel_day, at(9, 17))
    second = engine.recompute(day_schedule, travel_day, at(9, 17))

    assert first == second


def test_future_day_has_no_projection(
    engine: JourneyTrackingEngine,
    day_schedule: TrainSchedule,
    travel_day: date,
    at: Callable[..., datetime],
) -> None:
    """Given a future selected day, when recomputing, then the timeline is upcoming and nothing is projected."""
    snapshot = engine.recompute(day_schedule, travel_day + timedelta(days=2), at(9))

    assert snapshot.phase is JourneyPhase.FUTURE_DAY
    assert snapshot.projection is None
    assert all(item.state is StopState.UPCOMING for item in snapshot.items)


def test_missing_schedule_degrades_to_empty(
    engine: JourneyTrackingEngine, travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given no schedule, when recomputing, then the timeline is empty and nothing is projected."""
    snapshot = engine.recompute(None, travel_day, at(9))

    assert snapshot.items == []
    assert snapshot.projection is None


def test_refresh_matches_recompute(
    engine: JourneyTrackingEngine,
    day_schedule: TrainSchedule,
    travel_day: date,
    at: Callable[..., datetime],
) -> None:
    """Given an earlier snapshot, when refreshing, then the result equals a full recompute."""
    previous = engine.recompute(day_schedule, travel_day, at(8, 10))

    refreshed = engine.refresh(previous, day_schedule, travel_day, at(9, 40))

    assert refreshed == engine.recompute(day_schedule, travel_day, at(9, 40))
    assert refreshed.items[2].stop_ref is previous.items[2].stop_ref


def test_alarm_validation_uses_destination_station(
    engine: JourneyTrackingEngine,
    day_schedule: TrainSchedule,
    travel_day: date,
    at: Callable[..., datetime],
) -> None:
    """Given a destination before the terminus, when validating an alarm, then arrival at that station is used."""
    snapshot = engine.recompute(day_schedule, travel_day, at(8))

    assert engine.alarm_window(snapshot) == (at(8), at(10))
    assert engine.alarm_window(snapshot, "b") == (at(8), at(9))

    to_terminus = engine.validate_alarm(snapshot, 10, at(8))
    to_b = engine.validate_alarm(snapshot, 55, at(8), destination_station_id="b")

    assert to_terminus.is_valid is True
    assert to_b.reason is AlarmFailureReason.JOURNEY_TOO_SHORT


def test_alarm_validation_without_times_returns_none(
    engine: JourneyTrackingEngine, travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given an empty timeline, when validating an alarm, then there is nothing to validate."""
    snapshot = engine.recompute(None, travel_day, at(8))

    assert engine.validate_alarm(snapshot, 10, at(8)) is None
