"""Alarm scheduler that keeps alarms in memory and reports them through logging."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from journey_tracker.domain.models.alarm_metadata import AlarmMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledAlarm:
    """An alarm registered with the scheduler."""

    handle: str
    alarm_id: str
    alarm_time: datetime
    metadata: AlarmMetadata


class LoggingAlarmScheduler:
    """AlarmScheduler for headless runs.

    Alarms ring by logging a warning-level message at their alarm time. The
    handle is an opaque id unique per scheduled alarm.
    """

    def __init__(
        self, authorized: bool = True, clock: Callable[[], datetime] | None = None
    ) -> None:
        """Initialize the scheduler.

        Args:
            authorized: Whether authorization requests are granted.
            clock: Returns the current instant; defaults to aware now in the alarm's timezone.
        """
        self._authorized = authorized
        self._clock = clock
        self._alarms: dict[str, ScheduledAlarm] = {}
        self._timers: dict[str, asyncio.Task] = {}

    @property
    def alarms(self) -> dict[str, ScheduledAlarm]:
        """Scheduled alarms by handle."""
        return dict(self._alarms)

    async def request_authorization(self) -> bool:
        """Return whether alarms may be scheduled."""
        if not self._authorized:
            logger.warning("Alarm authorization denied")
        return self._authorized

    async def schedule(self, alarm_id: str, alarm_time: datetime, metadata: AlarmMetadata) -> str:
        """Register an alarm and start its timer.

        Returns:
            The alarm handle.
        """
        handle = f"{alarm_id}-{uuid.uuid4().hex[:8]}"
        self._alarms[handle] = ScheduledAlarm(
            handle=handle, alarm_id=alarm_id, alarm_time=alarm_time, metadata=metadata
        )
        self._timers[handle] = asyncio.create_task(self._ring_at(handle))
        logger.info(
            f"Alarm {handle} set for {alarm_time.isoformat()}: {metadata.train_name} "
            f"to {metadata.destination_name} ({metadata.destination_code})"
        )
        return handle

    async def cancel(self, handle: str) -> None:
        """Cancel an alarm. Unknown handles are ignored."""
        timer = self._timers.pop(handle, None)
        if timer is not None and not timer.done():
            timer.cancel()
        if self._alarms.pop(handle, None) is not None:
            logger.info(f"Alarm {handle} cancelled")

    async def _ring_at(self, handle: str) -> None:
        alarm = self._alarms.get(handle)
        if alarm is None:
            return
        now = self._clock() if self._clock else datetime.now(alarm.alarm_time.tzinfo)
        delay = (alarm.alarm_time - now).total_seconds()
        if delay > 0:
            await asyncio.sleep(delay)
        if self._alarms.pop(handle, None) is None:
            return
        self._timers.pop(handle, None)
        metadata = alarm.metadata
        logger.warning(
            f"ALARM: {metadata.train_name} arrives at {metadata.destination_name} "
            f"({metadata.destination_code}) in {metadata.offset_minutes} minutes"
        )
