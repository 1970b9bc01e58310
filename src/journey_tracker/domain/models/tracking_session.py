"""Tracking session domain model."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class TrackingSession:
    """One user-selected journey being tracked live."""

    session_id: str
    train_code: str
    selected_date: date
    alarm_offset_minutes: int | None = None
    destination_station_id: str | None = None
