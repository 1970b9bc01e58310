"""Schedule and journey repository backed by the backend query API."""

import logging
from datetime import date, tzinfo
from typing import TYPE_CHECKING

from journey_tracker.adapters.backend_api.constants import (
    QUERY_LIST_ROUTES,
    QUERY_LIST_STATIONS,
    QUERY_PROJECTED_FOR_ROUTE,
    QUERY_SEGMENTS_FOR_TRAIN,
    QUERY_TRAIN_SCHEDULE,
    QUERY_TRAINS_BY_ROUTE,
)
from journey_tracker.adapters.backend_api.schedule_parser import ScheduleParser
from journey_tracker.domain.models import (
    ProjectedTrain,
    Route,
    Segment,
    Station,
    TrainRouteJourney,
    TrainSchedule,
)

if TYPE_CHECKING:
    from journey_tracker.adapters.backend_api.http_client import BackendHttpClient

logger = logging.getLogger(__name__)


class BackendJourneyRepository:
    """Implements the schedule, journey and station repository ports over BackendHttpClient.

    Errors from the client propagate so callers can keep their cached data and retry.
    """

    def __init__(self, client: "BackendHttpClient", tz: tzinfo | None = None) -> None:
        """Initialize with an HTTP client and the timezone of schedule timestamps."""
        self._client = client
        self._tz = tz

    async def get_train_schedule(self, train_code: str) -> TrainSchedule | None:
        """Get the complete ordered stop list of a train."""
        value = await self._client.query(QUERY_TRAIN_SCHEDULE, {"trainCode": train_code})
        schedule = ScheduleParser.parse_schedule(value)
        if schedule is None:
            logger.info(f"No schedule found for train {train_code}")
        else:
            logger.debug(f"Fetched schedule for {train_code}: {len(schedule.stops)} stops")
        return schedule

    async def find_trains_by_route(
        self, departure_station_id: str, arrival_station_id: str
    ) -> list[TrainRouteJourney]:
        """Find trains stopping at both stations in travel order."""
        value = await self._client.query(
            QUERY_TRAINS_BY_ROUTE,
            {"departureStationId": departure_station_id, "arrivalStationId": arrival_station_id},
        )
        return ScheduleParser.parse_route_journeys(value)

    async def fetch_segments_for_train(self, train_id: str, selected_date: date) -> list[Segment]:
        """Get the ordered journey segments of a train for a day."""
        value = await self._client.query(
            QUERY_SEGMENTS_FOR_TRAIN,
            {"trainId": train_id, "selectedDate": selected_date.isoformat()},
        )
        return ScheduleParser.parse_segments(value, self._tz)

    async def list_stations(self) -> list[Station]:
        """Get every known station with its position."""
        value = await self._client.query(QUERY_LIST_STATIONS)
        return ScheduleParser.parse_stations(value)

    async def list_routes(self) -> list[Route]:
        """Get every known route polyline."""
        value = await self._client.query(QUERY_LIST_ROUTES)
        return ScheduleParser.parse_routes(value)

    async def fetch_projected_for_route(
        self, departure_station_id: str, arrival_station_id: str, selected_date: date
    ) -> list[ProjectedTrain]:
        """Get projected trains serving a station pair on a day."""
        value = await self._client.query(
            QUERY_PROJECTED_FOR_ROUTE,
            {
                "departureStationId": departure_station_id,
                "arrivalStationId": arrival_station_id,
                "selectedDate": selected_date.isoformat(),
            },
        )
        return ScheduleParser.parse_projected(value, self._tz)
