"""Station repository port."""

from typing import Protocol

from journey_tracker.domain.models.route import Route
from journey_tracker.domain.models.station import Station


class StationRepository(Protocol):
    """Port for retrieving station positions and route geometry."""

    async def list_stations(self) -> list[Station]:
        """Get every known station with its position."""
        ...

    async def list_routes(self) -> list[Route]:
        """Get every known route polyline."""
        ...
