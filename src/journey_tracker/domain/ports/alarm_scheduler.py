"""Alarm scheduler port (OS alarm collaborator)."""

from datetime import datetime
from typing import Protocol

from journey_tracker.domain.models.alarm_metadata import AlarmMetadata


class AlarmScheduler(Protocol):
    """Port for registering alarms with the operating system."""

    async def request_authorization(self) -> bool:
        """Ask for permission to schedule alarms. Returns True when granted."""
        ...

    async def schedule(self, alarm_id: str, alarm_time: datetime, metadata: AlarmMetadata) -> str:
        """Schedule a fixed-time alarm and return the OS alarm handle."""
        ...

    async def cancel(self, handle: str) -> None:
        """Cancel a previously scheduled alarm."""
        ...
