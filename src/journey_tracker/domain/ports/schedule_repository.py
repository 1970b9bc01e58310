"""Schedule repository port."""

from typing import Protocol

from journey_tracker.domain.models.train_schedule import TrainRouteJourney, TrainSchedule


class ScheduleRepository(Protocol):
    """Port for retrieving train schedules."""

    async def get_train_schedule(self, train_code: str) -> TrainSchedule | None:
        """Get the complete ordered stop list of a train, or None if unknown."""
        ...

    async def find_trains_by_route(
        self, departure_station_id: str, arrival_station_id: str
    ) -> list[TrainRouteJourney]:
        """Find trains that stop at the departure station and later at the arrival station."""
        ...
