"""Arrival alarm service port."""

from datetime import datetime
from typing import Protocol


class ArrivalAlarmService(Protocol):
    """Port for scheduling and cancelling arrival alarms."""

    async def schedule_arrival_alarm(
        self,
        activity_id: str,
        arrival_time: datetime,
        now: datetime,
        train_name: str,
        destination_name: str,
        destination_code: str,
        offset_minutes: int = 10,
    ) -> datetime | None:
        """Schedule an alarm before arrival.

        Returns:
            The alarm time, or None when it already lies in the past.

        Raises:
            AlarmSchedulingError: If authorization is missing or the scheduler fails.
        """
        ...

    async def cancel_arrival_alarm(self, activity_id: str) -> bool:
        """Cancel the alarm for an activity. Returns True if one was cancelled."""
        ...
