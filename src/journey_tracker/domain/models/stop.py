"""Stop domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Stop:
    """One scheduled station visit of a train.

    Arrival and departure are local wall-clock strings in "HH:MM:SS" format,
    without date or timezone.
    """

    sequence: int
    station_id: str
    station_code: str
    station_name: str
    city: str
    arrival_time_of_day: str | None = None
    departure_time_of_day: str | None = None
    is_origin: bool = False
    is_destination: bool = False


@dataclass(frozen=True)
class ResolvedStop:
    """A stop with its time-of-day strings resolved to concrete timestamps."""

    stop: Stop
    resolved_arrival: datetime | None = None
    resolved_departure: datetime | None = None

    @property
    def station_id(self) -> str:
        """Station identifier of the underlying stop."""
        return self.stop.station_id

    @property
    def earliest_time(self) -> datetime | None:
        """Arrival if known, otherwise departure."""
        return self.resolved_arrival or self.resolved_departure

    @property
    def latest_time(self) -> datetime | None:
        """Departure if known, otherwise arrival."""
        return self.resolved_departure or self.resolved_arrival
