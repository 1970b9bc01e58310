"""Journey repository port."""

from datetime import date
from typing import Protocol

from journey_tracker.domain.models.projected_train import ProjectedTrain
from journey_tracker.domain.models.segment import Segment


class JourneyRepository(Protocol):
    """Port for retrieving timed journey segments."""

    async def fetch_segments_for_train(self, train_id: str, selected_date: date) -> list[Segment]:
        """Get the ordered segments of a train for the selected day."""
        ...

    async def fetch_projected_for_route(
        self, departure_station_id: str, arrival_station_id: str, selected_date: date
    ) -> list[ProjectedTrain]:
        """Get trains serving a station pair on the selected day as projected snapshots."""
        ...
