"""Main entry point for the journey tracker application."""

import asyncio
import logging
import sys

import aiohttp

from journey_tracker.adapters.alarms import LoggingAlarmScheduler
from journey_tracker.adapters.backend_api import BackendHttpClient, BackendJourneyRepository
from journey_tracker.adapters.cache import ProjectionSnapshotCache
from journey_tracker.adapters.config import AppConfig, JourneyConfigurationLoader
from journey_tracker.adapters.tracking import LiveRefreshLoop, StateUpdater, TrackingState
from journey_tracker.application.alarm_service import AlarmService
from journey_tracker.application.tracking_engine import JourneyTrackingEngine
from journey_tracker.application.train_projector import build_station_lookup
from journey_tracker.domain.models import Route, Station, TrackingSession

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

STATUS_REPORT_INTERVAL_SECONDS = 30


async def load_reference_data(
    repository: BackendJourneyRepository,
) -> tuple[list[Station], list[Route]]:
    """Fetch stations and route polylines. Failures degrade to empty lists."""
    try:
        stations = await repository.list_stations()
    except Exception as e:
        logger.warning(f"Could not load stations, positions will be unavailable: {e}")
        stations = []
    try:
        routes = await repository.list_routes()
    except Exception as e:
        logger.warning(f"Could not load routes, falling back to straight-line projection: {e}")
        routes = []
    logger.info(f"Loaded {len(stations)} station(s) and {len(routes)} route(s)")
    return stations, routes


def describe_state(session: TrackingSession, state: TrackingState) -> str:
    """One-line summary of a session's tracking state."""
    parts = [f"{session.train_code} ({session.selected_date})"]
    if state.phase is not None:
        parts.append(state.phase.value)
    current = next((item for item in state.timeline if item.state.value == "current"), None)
    if current is not None:
        parts.append(f"at/after {current.stop_ref.stop.station_name}")
    projection = state.projection
    if projection is not None:
        parts.append(
            f"{'moving' if projection.moving else 'stopped'} at "
            f"{projection.position.latitude:.5f},{projection.position.longitude:.5f}"
        )
    if state.error_message:
        parts.append(state.error_message)
    return " - ".join(parts)


async def run_tracking(config: AppConfig, sessions: list[TrackingSession]) -> None:
    """Track sessions until cancelled, logging a status line periodically."""
    async with aiohttp.ClientSession() as http_session:
        client = BackendHttpClient(
            http_session, config.backend_url, timeout_seconds=config.backend_timeout_seconds
        )
        repository = BackendJourneyRepository(client, tz=config.timezone_info)
        stations, routes = await load_reference_data(repository)
        stations_by_id = build_station_lookup(stations)
        routes_by_id = {route.id: route for route in routes}

        snapshot_cache = ProjectionSnapshotCache(
            config.snapshot_cache_path, tz=config.timezone_info
        )
        alarm_service = AlarmService(LoggingAlarmScheduler()) if config.alarm_enabled else None

        tracked: list[tuple[TrackingSession, TrackingState, LiveRefreshLoop]] = []
        for session in sessions:
            state = TrackingState()
            refresh_loop = LiveRefreshLoop(
                session=session,
                engine=JourneyTrackingEngine(stations_by_id, routes_by_id, config.phase_policy),
                schedule_repository=repository,
                config=config,
                state_updater=StateUpdater(state),
                journey_repository=repository,
                snapshot_cache=snapshot_cache,
                alarm_service=alarm_service,
            )
            tracked.append((session, state, refresh_loop))

        for _, _, refresh_loop in tracked:
            await refresh_loop.start()

        try:
            while True:
                await asyncio.sleep(STATUS_REPORT_INTERVAL_SECONDS)
                for session, state, _ in tracked:
                    logger.info(describe_state(session, state))
        finally:
            for _, _, refresh_loop in tracked:
                await refresh_loop.stop()
            if alarm_service is not None:
                await alarm_service.cancel_all_alarms()


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()

    # Load tracked journeys
    try:
        sessions = JourneyConfigurationLoader.load(config)
        logger.info(f"Loaded {len(sessions)} journey(s):")
        for session in sessions:
            logger.info(f"  - {session.train_code} on {session.selected_date}")
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid journey configuration: {e}")
        sys.exit(1)

    if not sessions:
        logger.error("No journeys configured.")
        logger.error("Please configure [[journeys]] in your config.toml file.")
        logger.error("Or copy config.example.toml to config.toml and customize it.")
        sys.exit(1)

    try:
        await run_tracking(config, sessions)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    asyncio.run(main())
