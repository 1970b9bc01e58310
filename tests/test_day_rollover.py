"""Tests for day rollover resolution."""

from collections.abc import Callable
from datetime import date, datetime

from factories import make_stop

from journey_tracker.application.day_rollover import DayRolloverResolver
from journey_tracker.domain.models import PhasePolicy, Stop


def _instants(resolved) -> list[datetime]:
    return [
        moment
        for stop in resolved
        for moment in (stop.resolved_arrival, stop.resolved_departure)
        if moment is not None
    ]


def test_daytime_schedule_resolves_on_selected_day(
    day_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given a daytime schedule after its departure, when resolving, then all times are on the selected day."""
    resolved = DayRolloverResolver().resolve(day_stops, travel_day, at(8, 30))

    assert resolved[0].resolved_departure == at(8)
    assert resolved[1].resolved_arrival == at(9)
    assert resolved[1].resolved_departure == at(9, 5)
    assert resolved[2].resolved_arrival == at(10)
    assert resolved[0].resolved_arrival is None


def test_calendar_policy_starts_on_previous_day_before_first_departure(
    day_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given now before the selected day's first departure, when resolving, then the journey starts the day before."""
    resolver = DayRolloverResolver(PhasePolicy.CALENDAR)

    assert resolver.journey_start_day("08:00:00", travel_day, at(7)) == date(2026, 3, 13)
    resolved = resolver.resolve(day_stops, travel_day, at(7))

    assert resolved[0].resolved_departure == at(8, day_offset=-1)
    assert resolved[2].resolved_arrival == at(10, day_offset=-1)


def test_running_policy_keeps_finished_daytime_journey_on_selected_day(
    day_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given yesterday's daytime journey already ended, when resolving with the running policy, then the selected day is used."""
    resolved = DayRolloverResolver(PhasePolicy.CALENDAR_RUNNING).resolve(
        day_stops, travel_day, at(7)
    )

    assert resolved[0].resolved_departure == at(8)
    assert resolved[2].resolved_arrival == at(10)


def test_running_policy_detects_overnight_journey_still_running(
    overnight_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given an overnight journey still running after midnight, when resolving with the running policy, then it starts the day before."""
    resolved = DayRolloverResolver(PhasePolicy.CALENDAR_RUNNING).resolve(
        overnight_stops, travel_day, at(0, 30)
    )

    assert resolved[0].resolved_departure == at(23, 50, day_offset=-1)
    assert resolved[2].resolved_arrival == at(1, 40)


def test_overnight_schedule_rolls_over_after_midnight(
    overnight_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given stops at 23:50, 00:15 and 01:40, when now is 23:55 on D, then stops after midnight are on D+1."""
    resolver = DayRolloverResolver()

    assert resolver.journey_start_day("23:50:00", travel_day, at(23, 55)) == travel_day
    resolved = resolver.resolve(overnight_stops, travel_day, at(23, 55))

    assert resolved[0].resolved_departure == at(23, 50)
    assert resolved[1].resolved_arrival == at(0, 15, day_offset=1)
    assert resolved[2].resolved_arrival == at(1, 40, day_offset=1)


def test_overnight_journey_started_previous_day_is_detected(
    overnight_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given now after midnight before the first departure time, when resolving, then the journey starts the day before."""
    resolver = DayRolloverResolver(PhasePolicy.CALENDAR)

    resolved = resolver.resolve(overnight_stops, travel_day, at(0, 30))

    assert resolved[0].resolved_departure == at(23, 50, day_offset=-1)
    assert resolved[1].resolved_arrival == at(0, 15)


def test_schedule_policy_always_starts_on_selected_day(
    overnight_stops: list[Stop], travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given the schedule policy, when now is after midnight, then the journey still starts on the selected day."""
    resolved = DayRolloverResolver(PhasePolicy.SCHEDULE).resolve(
        overnight_stops, travel_day, at(0, 30)
    )

    assert resolved[0].resolved_departure == at(23, 50)
    assert resolved[2].resolved_arrival == at(1, 40, day_offset=1)


def test_output_is_non_decreasing(
    travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given a schedule crossing midnight with arrival after departure strings, when resolving, then timestamps never decrease."""
    stops = [
        make_stop(1, "a", departure="22:10:00"),
        make_stop(2, "b", arrival="23:58:00", departure="00:03:00"),
        make_stop(3, "c", arrival="02:00:00", departure="02:05:00"),
        make_stop(4, "d", arrival="05:30:00"),
    ]

    resolved = DayRolloverResolver().resolve(stops, travel_day, at(22, 30))
    instants = _instants(resolved)

    assert instants == sorted(instants)
    assert resolved[1].resolved_departure == at(0, 3, day_offset=1)
    assert resolved[3].resolved_arrival == at(5, 30, day_offset=1)


def test_stops_without_times_are_kept(travel_day: date, at: Callable[..., datetime]) -> None:
    """Given a pass-through stop without times, when resolving, then it stays with empty timestamps."""
    stops = [
        make_stop(1, "a", departure="08:00:00"),
        make_stop(2, "b"),
        make_stop(3, "c", arrival="09:00:00"),
    ]

    resolved = DayRolloverResolver().resolve(stops, travel_day, at(8, 30))

    assert len(resolved) == 3
    assert resolved[1].resolved_arrival is None
    assert resolved[1].resolved_departure is None
    assert resolved[2].resolved_arrival == at(9)


def test_empty_or_unusable_schedules_resolve_to_nothing(
    travel_day: date, at: Callable[..., datetime]
) -> None:
    """Given no stops, no times or a garbage reference time, when resolving, then the result is empty."""
    resolver = DayRolloverResolver()

    assert resolver.resolve([], travel_day, at(8)) == []
    assert resolver.resolve([make_stop(1, "a")], travel_day, at(8)) == []
    assert resolver.resolve([make_stop(1, "a", departure="later")], travel_day, at(8)) == []


def test_reference_time_falls_back_to_first_arrival() -> None:
    """Given no departure strings, when picking the reference, then the first arrival is used."""
    stops = [make_stop(1, "a"), make_stop(2, "b", arrival="06:00:00")]

    assert DayRolloverResolver.reference_time_of_day(stops) == "06:00:00"
