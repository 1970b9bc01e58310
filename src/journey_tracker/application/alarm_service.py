"""Use case for scheduling and cancelling arrival alarms."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from journey_tracker.application.alarm_registry import AlarmRegistry
from journey_tracker.application.alarm_validator import compute_alarm_time
from journey_tracker.domain.models.alarm_metadata import AlarmMetadata
from journey_tracker.domain.models.alarm_scheduling_error import AlarmSchedulingError

if TYPE_CHECKING:
    from journey_tracker.domain.ports import AlarmScheduler

logger = logging.getLogger(__name__)

DEFAULT_OFFSET_MINUTES = 10


class AlarmService:
    """Schedules arrival alarms through the OS alarm collaborator."""

    def __init__(self, scheduler: AlarmScheduler, registry: AlarmRegistry | None = None) -> None:
        """Initialize with an alarm scheduler and an optional shared registry."""
        self._scheduler = scheduler
        self._registry = registry or AlarmRegistry()

    async def schedule_arrival_alarm(
        self,
        activity_id: str,
        arrival_time: datetime,
        now: datetime,
        train_name: str,
        destination_name: str,
        destination_code: str,
        offset_minutes: int = DEFAULT_OFFSET_MINUTES,
    ) -> datetime | None:
        """Schedule an alarm `offset_minutes` before arrival.

        An existing alarm for the same activity is cancelled first. If that
        cancellation fails the old alarm stays registered and nothing new is
        scheduled.

        Args:
            activity_id: Id of the tracking activity the alarm belongs to.
            arrival_time: Expected arrival at the destination.
            now: Current instant.
            train_name: Train name shown in the alarm.
            destination_name: Destination station name.
            destination_code: Destination station code.
            offset_minutes: Minutes before arrival to ring.

        Returns:
            The alarm time, or None when it already lies in the past.

        Raises:
            AlarmSchedulingError: If authorization is missing, the existing alarm
                cannot be cancelled or the scheduler fails.
        """
        if not await self._scheduler.request_authorization():
            raise AlarmSchedulingError("Alarm authorization not granted")

        alarm_time = compute_alarm_time(arrival_time, offset_minutes)
        if alarm_time <= now:
            logger.warning(f"Alarm time {alarm_time.isoformat()} is in the past, skipping")
            return None

        logger.info(
            f"Scheduling alarm for activity {activity_id}: arrival {arrival_time.isoformat()}, "
            f"alarm {alarm_time.isoformat()} ({offset_minutes} min before)"
        )

        if await self.has_scheduled_alarm(activity_id) and not await self.cancel_arrival_alarm(
            activity_id
        ):
            raise AlarmSchedulingError(
                f"Could not replace existing alarm for activity {activity_id}"
            )

        metadata = AlarmMetadata(
            activity_id=activity_id,
            train_name=train_name,
            destination_name=destination_name,
            destination_code=destination_code,
            offset_minutes=offset_minutes,
        )
        try:
            handle = await self._scheduler.schedule(activity_id, alarm_time, metadata)
        except Exception as e:
            logger.error(f"Failed to schedule alarm for activity {activity_id}: {e}")
            raise AlarmSchedulingError(str(e)) from e

        await self._registry.set(activity_id, handle)
        logger.info(f"Scheduled alarm {handle} for activity {activity_id}")
        return alarm_time

    async def cancel_arrival_alarm(self, activity_id: str) -> bool:
        """Cancel the alarm for an activity. Returns True if one was cancelled."""
        handle = await self._registry.get(activity_id)
        if handle is None:
            return False

        try:
            await self._scheduler.cancel(handle)
        except Exception as e:
            logger.warning(f"Failed to cancel alarm {handle}: {e}")
            return False

        await self._registry.remove(activity_id)
        logger.info(f"Cancelled alarm for activity {activity_id}")
        return True

    async def cancel_all_alarms(self) -> int:
        """Cancel every registered alarm and return how many were registered."""
        entries = await self._registry.pop_all()
        for handle in entries.values():
            try:
                await self._scheduler.cancel(handle)
            except Exception as e:
                logger.warning(f"Failed to cancel alarm {handle}: {e}")
        logger.info(f"Cancelled all {len(entries)} alarms")
        return len(entries)

    async def has_scheduled_alarm(self, activity_id: str) -> bool:
        """Whether an alarm is registered for the activity."""
        return await self._registry.get(activity_id) is not None

    async def activity_id_for(self, handle: str) -> str | None:
        """Return the activity id that owns an alarm handle."""
        return await self._registry.find_activity(handle)
