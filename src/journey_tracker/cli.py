"""CLI for inspecting train journeys and running the live tracker."""

import asyncio
import json
import sys
from datetime import date, datetime, tzinfo
from typing import Any

import aiohttp

from journey_tracker.adapters.backend_api import (
    BackendApiError,
    BackendHttpClient,
    BackendJourneyRepository,
)
from journey_tracker.adapters.cache.snapshot_cache import projection_to_dict
from journey_tracker.adapters.config import AppConfig, JourneyConfigurationLoader
from journey_tracker.application.alarm_validator import compute_alarm_time, validate_alarm_timing
from journey_tracker.application.tracking_engine import JourneyTrackingEngine
from journey_tracker.application.train_projector import build_station_lookup
from journey_tracker.domain.models import (
    AlarmValidationResult,
    ProjectedTrain,
    TimelineItem,
    TrainRouteJourney,
)


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


def _clock(moment: datetime | None) -> str:
    return moment.strftime("%H:%M") if moment is not None else "--:--"


def parse_date_arg(value: str | None, tz: tzinfo) -> date:
    """Parse a --date argument; defaults to today in the configured timezone."""
    if not value or value == "today":
        return datetime.now(tz).date()
    return date.fromisoformat(value)


def parse_datetime_arg(value: str | None, tz: tzinfo) -> datetime:
    """Parse an ISO timestamp argument. Naive values are taken in the configured timezone."""
    if not value:
        return datetime.now(tz)
    moment = datetime.fromisoformat(value)
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=tz)


def timeline_to_dicts(items: list[TimelineItem]) -> list[dict[str, Any]]:
    """Convert timeline items to JSON-serializable dicts."""
    return [
        {
            "sequence": item.stop_ref.stop.sequence,
            "stationId": item.station_id,
            "stationCode": item.stop_ref.stop.station_code,
            "stationName": item.stop_ref.stop.station_name,
            "arrival": _iso(item.stop_ref.resolved_arrival),
            "departure": _iso(item.stop_ref.resolved_departure),
            "state": item.state.value,
            "progressToNext": item.progress_to_next,
        }
        for item in items
    ]


def alarm_result_to_dict(
    result: AlarmValidationResult, alarm_time: datetime | None
) -> dict[str, Any]:
    """Convert an alarm validation result to a JSON-serializable dict."""
    return {
        "isValid": result.is_valid,
        "reason": result.reason.value if result.reason else None,
        "requestedOffsetMinutes": result.requested_offset_minutes,
        "minutesUntilArrival": result.minutes_until_arrival,
        "journeyDurationMinutes": result.journey_duration_minutes,
        "minimumRequiredMinutes": result.minimum_required_minutes,
        "alarmTime": _iso(alarm_time),
    }


def route_journey_to_dict(journey: TrainRouteJourney) -> dict[str, Any]:
    """Convert a trains-by-route result to a JSON-serializable dict."""
    return {
        "trainId": journey.train_id,
        "trainCode": journey.train_code,
        "trainName": journey.train_name,
        "departureStation": journey.departure_station.name,
        "departureTime": journey.departure_time,
        "arrivalStation": journey.arrival_station.name,
        "arrivalTime": journey.arrival_time,
        "stopsBetween": journey.stops_between,
    }


def print_timeline(train_name: str, phase: str, items: list[TimelineItem]) -> None:
    """Print a journey timeline as a table."""
    print(f"\n{train_name} - {phase}")
    print("=" * 70)
    markers = {"completed": "x", "current": ">", "upcoming": " "}
    for item in items:
        stop = item.stop_ref.stop
        progress = (
            f"  {item.progress_to_next * 100:5.1f}%" if item.progress_to_next is not None else ""
        )
        print(
            f"[{markers[item.state.value]}] {stop.sequence:>3}  "
            f"{_clock(item.stop_ref.resolved_arrival)} {_clock(item.stop_ref.resolved_departure)}  "
            f"{stop.station_name} ({stop.station_code}){progress}"
        )


def print_projection(projection: ProjectedTrain | None) -> None:
    """Print a projected train position."""
    if projection is None:
        print("No projection available (train not running on the selected day).")
        return
    print(f"\n{projection.name} ({projection.code})")
    print(f"  Position: {projection.position.latitude:.6f}, {projection.position.longitude:.6f}")
    print(f"  Moving: {'yes' if projection.moving else 'no'}")
    if projection.from_station and projection.to_station:
        print(f"  Segment: {projection.from_station.name} -> {projection.to_station.name}")
    if projection.progress is not None:
        print(f"  Progress: {projection.progress * 100:.1f}%")
    if projection.bearing is not None:
        print(f"  Bearing: {projection.bearing:.0f} deg")
    if projection.speed_kph is not None:
        print(f"  Speed: {projection.speed_kph:.0f} km/h")


async def show_timeline(
    config: AppConfig, train_code: str, selected_date: date, format_json: bool = False
) -> None:
    """Fetch a schedule and print its timeline for now."""
    tz = config.timezone_info
    async with aiohttp.ClientSession() as session:
        client = BackendHttpClient(session, config.backend_url, config.backend_timeout_seconds)
        repository = BackendJourneyRepository(client, tz=tz)
        schedule = await repository.get_train_schedule(train_code)

    if schedule is None or not schedule.stops:
        print(f"Train {train_code} not found or has no stops.", file=sys.stderr)
        sys.exit(1)

    engine = JourneyTrackingEngine(policy=config.phase_policy)
    snapshot = engine.recompute(schedule, selected_date, datetime.now(tz))

    if format_json:
        output = {
            "trainCode": schedule.train_code,
            "trainName": schedule.train_name,
            "selectedDate": selected_date.isoformat(),
            "phase": snapshot.phase.value,
            "items": timeline_to_dicts(snapshot.items),
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print_timeline(
            f"{schedule.train_name} ({schedule.train_code})", snapshot.phase.value, snapshot.items
        )


async def show_projection(
    config: AppConfig, train_code: str, selected_date: date, format_json: bool = False
) -> None:
    """Fetch schedule, stations and routes and print the projected position for now."""
    tz = config.timezone_info
    async with aiohttp.ClientSession() as session:
        client = BackendHttpClient(session, config.backend_url, config.backend_timeout_seconds)
        repository = BackendJourneyRepository(client, tz=tz)
        schedule = await repository.get_train_schedule(train_code)
        if schedule is None or not schedule.stops:
            print(f"Train {train_code} not found or has no stops.", file=sys.stderr)
            sys.exit(1)
        stations = await repository.list_stations()
        routes = await repository.list_routes()
        segments = []
        if schedule.train_id:
            try:
                segments = await repository.fetch_segments_for_train(
                    schedule.train_id, selected_date
                )
            except BackendApiError as e:
                print(f"Segments unavailable, using stop times: {e}", file=sys.stderr)

    engine = JourneyTrackingEngine(
        build_station_lookup(stations),
        {route.id: route for route in routes},
        config.phase_policy,
    )
    snapshot = engine.recompute(schedule, selected_date, datetime.now(tz), segments)

    if format_json:
        projection = snapshot.projection
        print(
            json.dumps(
                projection_to_dict(projection) if projection else None,
                indent=2,
                ensure_ascii=False,
            )
        )
    else:
        print_projection(snapshot.projection)


def show_alarm_validation(
    offset_minutes: int,
    departure: datetime,
    arrival: datetime,
    now: datetime,
    format_json: bool = False,
) -> bool:
    """Validate an alarm offset and print the outcome. Returns whether it is valid."""
    result = validate_alarm_timing(offset_minutes, departure, arrival, now)
    alarm_time = compute_alarm_time(arrival, offset_minutes) if result.is_valid else None

    if format_json:
        print(json.dumps(alarm_result_to_dict(result, alarm_time), indent=2))
    elif result.is_valid:
        print(f"Alarm valid: rings at {alarm_time.isoformat()}")
    else:
        print(f"Alarm invalid: {result.reason.value}")
        print(f"  Requested offset: {result.requested_offset_minutes} min")
        if result.minutes_until_arrival is not None:
            print(f"  Minutes until arrival: {result.minutes_until_arrival}")
        if result.journey_duration_minutes is not None:
            print(f"  Journey duration: {result.journey_duration_minutes} min")
        if result.minimum_required_minutes is not None:
            print(f"  Minimum required: {result.minimum_required_minutes} min")
    return result.is_valid


async def show_trains_by_route(
    config: AppConfig, from_station_id: str, to_station_id: str, format_json: bool = False
) -> None:
    """Print trains stopping at both stations in travel order."""
    async with aiohttp.ClientSession() as session:
        client = BackendHttpClient(session, config.backend_url, config.backend_timeout_seconds)
        repository = BackendJourneyRepository(client, tz=config.timezone_info)
        journeys = await repository.find_trains_by_route(from_station_id, to_station_id)

    if format_json:
        output = [route_journey_to_dict(j) for j in journeys]
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not journeys:
        print(f"No trains found from {from_station_id} to {to_station_id}", file=sys.stderr)
        sys.exit(1)
    print(f"\nFound {len(journeys)} train(s):\n")
    for journey in journeys:
        print(f"  {journey.train_name} ({journey.train_code})")
        print(
            f"    {journey.departure_station.name} {journey.departure_time or '--:--'} -> "
            f"{journey.arrival_station.name} {journey.arrival_time or '--:--'} "
            f"({journey.stops_between} stop(s) between)"
        )


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Train journey tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the stop timeline of a train for today
  journey-tracker timeline 7

  # Show where a train is expected to be right now
  journey-tracker project 7 --date 2026-03-14 --json

  # Check whether an alarm 10 minutes before arrival is possible
  journey-tracker validate-alarm --departure 2026-03-14T08:00 --arrival 2026-03-14T10:00 --offset 10

  # Find trains between two stations
  journey-tracker trains GMR BD

  # Track the journeys from config.toml until interrupted
  journey-tracker track
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    timeline_parser = subparsers.add_parser("timeline", help="Show a train's stop timeline")
    timeline_parser.add_argument("train_code", help="Train code")
    timeline_parser.add_argument("--date", help="Selected date (YYYY-MM-DD, default: today)")
    timeline_parser.add_argument("--json", action="store_true", help="Output as JSON")

    project_parser = subparsers.add_parser("project", help="Show a train's projected position")
    project_parser.add_argument("train_code", help="Train code")
    project_parser.add_argument("--date", help="Selected date (YYYY-MM-DD, default: today)")
    project_parser.add_argument("--json", action="store_true", help="Output as JSON")

    alarm_parser = subparsers.add_parser("validate-alarm", help="Validate an arrival alarm offset")
    alarm_parser.add_argument("--departure", required=True, help="Journey departure (ISO 8601)")
    alarm_parser.add_argument("--arrival", required=True, help="Journey arrival (ISO 8601)")
    alarm_parser.add_argument(
        "--offset", type=int, required=True, help="Minutes before arrival to ring"
    )
    alarm_parser.add_argument("--now", help="Current time (ISO 8601, default: now)")
    alarm_parser.add_argument("--json", action="store_true", help="Output as JSON")

    trains_parser = subparsers.add_parser("trains", help="Find trains between two stations")
    trains_parser.add_argument("from_station_id", help="Departure station ID")
    trains_parser.add_argument("to_station_id", help="Arrival station ID")
    trains_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("track", help="Track configured journeys until interrupted")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = AppConfig()
    tz = config.timezone_info

    try:
        if args.command == "timeline":
            await show_timeline(
                config, args.train_code, parse_date_arg(args.date, tz), format_json=args.json
            )

        elif args.command == "project":
            await show_projection(
                config, args.train_code, parse_date_arg(args.date, tz), format_json=args.json
            )

        elif args.command == "validate-alarm":
            valid = show_alarm_validation(
                args.offset,
                parse_datetime_arg(args.departure, tz),
                parse_datetime_arg(args.arrival, tz),
                parse_datetime_arg(args.now, tz),
                format_json=args.json,
            )
            if not valid:
                sys.exit(2)

        elif args.command == "trains":
            await show_trains_by_route(
                config, args.from_station_id, args.to_station_id, format_json=args.json
            )

        elif args.command == "track":
            from journey_tracker.main import run_tracking

            sessions = JourneyConfigurationLoader.load(config)
            if not sessions:
                print("No journeys configured in config.toml.", file=sys.stderr)
                sys.exit(1)
            await run_tracking(config, sessions)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except (BackendApiError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
