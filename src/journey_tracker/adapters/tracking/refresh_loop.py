"""Live refresh loop for one tracking session."""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from journey_tracker.adapters.backend_api.http_client import BackendApiError
from journey_tracker.domain.contracts.refresh_loop import RefreshLoopProtocol
from journey_tracker.domain.models.alarm_scheduling_error import AlarmSchedulingError
from journey_tracker.domain.models.error_details import ErrorDetails

if TYPE_CHECKING:
    from collections.abc import Callable

    from journey_tracker.adapters.config.app_config import AppConfig
    from journey_tracker.adapters.tracking.state_updater import StateUpdater
    from journey_tracker.domain.contracts.snapshot_cache import SnapshotCacheProtocol
    from journey_tracker.domain.models.segment import Segment
    from journey_tracker.domain.models.timeline import TrackingSnapshot
    from journey_tracker.domain.models.tracking_session import TrackingSession
    from journey_tracker.domain.models.train_schedule import TrainSchedule
    from journey_tracker.domain.ports import (
        ArrivalAlarmService,
        JourneyRepository,
        ScheduleRepository,
        TrackingEngine,
    )

logger = logging.getLogger(__name__)


def _extract_error_details(error: Exception) -> ErrorDetails:
    """Extract HTTP status code and error reason from exception."""
    if isinstance(error, BackendApiError) and error.status_code is not None:
        status_code: int | None = error.status_code
    else:
        # Format: "Backend query failed (502): ..."
        status_match = re.search(r"\((\d{3})\)", str(error))
        status_code = int(status_match.group(1)) if status_match else None

    if status_code == 429:
        reason = "Rate limit exceeded"
    elif status_code == 502:
        reason = "Bad gateway (server error)"
    elif status_code == 503:
        reason = "Service unavailable"
    elif status_code == 504:
        reason = "Gateway timeout"
    elif status_code is not None:
        reason = f"HTTP {status_code}"
    elif isinstance(error, asyncio.TimeoutError):
        reason = "Request timed out"
    else:
        reason = "Unknown error"

    return ErrorDetails(status_code=status_code, reason=reason)


class LiveRefreshLoop(RefreshLoopProtocol):
    """Keeps the timeline and projected position of one session current.

    Every tick recomputes against the wall clock from cached inputs. The
    schedule is fetched in the background, so a slow or failing backend never
    delays a tick; failed fetches are retried after `schedule_retry_seconds`.
    """

    def __init__(
        self,
        session: TrackingSession,
        engine: TrackingEngine,
        schedule_repository: ScheduleRepository,
        config: AppConfig,
        state_updater: StateUpdater,
        journey_repository: JourneyRepository | None = None,
        snapshot_cache: SnapshotCacheProtocol | None = None,
        alarm_service: ArrivalAlarmService | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the refresh loop.

        Args:
            session: The tracking session to keep current.
            engine: Engine computing timeline and projection.
            schedule_repository: Source of the train's stop list.
            config: Application configuration.
            state_updater: Updater for tracking state.
            journey_repository: Optional source of explicit journey segments.
            snapshot_cache: Optional cache of the last projection for instant restore.
            alarm_service: Optional service used to arm the arrival alarm.
            clock: Returns the current instant; defaults to now in the configured timezone.
        """
        self.session = session
        self.engine = engine
        self.schedule_repository = schedule_repository
        self.config = config
        self.state_updater = state_updater
        self.journey_repository = journey_repository
        self.snapshot_cache = snapshot_cache
        self.alarm_service = alarm_service
        self._clock = clock or (lambda: datetime.now(config.timezone_info))

        self.schedule: TrainSchedule | None = None
        self.segments: list[Segment] = []
        self.snapshot: TrackingSnapshot | None = None
        self._next_fetch_at: datetime | None = None
        self._segments_due = False
        self._alarm_armed = False
        self._last_saved_key: tuple | None = None
        self._task: asyncio.Task | None = None
        self._fetch_task: asyncio.Task | None = None

    @property
    def session_id(self) -> str:
        """Id of the tracked session."""
        return self.session.session_id

    async def start(self) -> None:
        """Select the session, restore the cached projection and start ticking."""
        if self._task is not None and not self._task.done():
            logger.warning(f"Refresh loop for {self.session_id} already running")
            return

        self.state_updater.select(self.session_id)
        self._restore_cached_projection()
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info(f"Started refresh loop for {self.session_id} ({self.session.train_code})")

    async def stop(self) -> None:
        """Stop the refresh loop and wait for it to finish."""
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                logger.info(f"Refresh loop for {self.session_id} cancelled")
            logger.info(f"Stopped refresh loop for {self.session_id}")

    def cancel(self) -> None:
        """Deselect the session and cancel pending work.

        Takes effect before returning: no tick or fetch completing later can
        write state for this session.
        """
        self.state_updater.clear_selection(self.session_id)
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def change_session(self, session: TrackingSession) -> None:
        """Switch to a new train, date or alarm offset.

        The next tick rebuilds from scratch. A new train refetches the schedule, a
        new date refetches the segments, and an armed alarm is cancelled and armed
        again once the new journey is known.
        """
        previous = self.session
        train_changed = session.train_code != previous.train_code
        date_changed = session.selected_date != previous.selected_date

        if self._alarm_armed and self.alarm_service is not None:
            await self.alarm_service.cancel_arrival_alarm(previous.session_id)
        self._alarm_armed = False

        if session.session_id != previous.session_id:
            self.state_updater.select(session.session_id)
        self.session = session
        self.snapshot = None
        self._last_saved_key = None

        if train_changed or date_changed:
            if self._fetch_task is not None and not self._fetch_task.done():
                self._fetch_task.cancel()
            self.segments = []
            self._next_fetch_at = None
            self._segments_due = self.schedule is not None
        if train_changed:
            self.schedule = None
            self._segments_due = False

        logger.info(
            f"Session {session.session_id} now tracks {session.train_code} "
            f"on {session.selected_date}"
        )

        if self.schedule is not None and not self._segments_due:
            self.tick()
            await self._arm_alarm()

    async def _refresh_loop(self) -> None:
        """Main refresh loop."""
        try:
            while True:
                if self._fetch_due():
                    fetch = self.load_schedule() if self.schedule is None else self.load_segments()
                    self._fetch_task = asyncio.create_task(fetch)
                self.tick()
                await asyncio.sleep(self.config.refresh_interval_seconds)
        except asyncio.CancelledError:
            logger.info(f"Refresh loop for {self.session_id} cancelled")
            raise

    def _fetch_due(self) -> bool:
        if self.schedule is not None and not self._segments_due:
            return False
        if self._fetch_task is not None and not self._fetch_task.done():
            return False
        return self._next_fetch_at is None or self._clock() >= self._next_fetch_at

    async def load_schedule(self) -> bool:
        """Fetch the schedule (and segments) for the session.

        On failure the error is reported, any cached data is kept and a retry
        is scheduled.

        Returns:
            True if a schedule was loaded.
        """
        session = self.session
        try:
            schedule = await self.schedule_repository.get_train_schedule(session.train_code)
        except Exception as e:
            error_details = _extract_error_details(e)
            logger.error(
                f"Failed to fetch schedule for {session.train_code}: "
                f"{error_details.reason} (status: {error_details.status_code}, error: {e})"
            )
            if error_details.status_code == 429:
                logger.warning(
                    f"Rate limit (429) detected for {session.train_code} - "
                    "consider a longer schedule_retry_seconds"
                )
            self._schedule_retry()
            if self.state_updater.is_selected(session.session_id):
                self.state_updater.update_api_status("error", error_details)
            return False

        if schedule is None or not schedule.stops:
            logger.warning(f"No stops returned for train {session.train_code}")
            self._schedule_retry()
            if self.state_updater.is_selected(session.session_id):
                self.state_updater.update_api_status(
                    "error", ErrorDetails(reason="No schedule available", retryable=True)
                )
            return False

        segments = await self._load_segments(schedule, session)

        if session is not self.session or not self.state_updater.is_selected(session.session_id):
            logger.debug(f"Discarding schedule for {session.train_code}: session changed")
            return False

        self.schedule = schedule
        self.segments = segments
        self._segments_due = False
        self.snapshot = None
        self.state_updater.update_api_status("success")
        logger.info(f"Loaded schedule for {schedule.train_code}: {len(schedule.stops)} stops")

        self.tick()
        await self._arm_alarm()
        return True

    async def load_segments(self) -> bool:
        """Refetch the segments of the loaded schedule for the current date.

        Returns:
            True if the segments were applied to the session.
        """
        schedule = self.schedule
        session = self.session
        if schedule is None:
            return False

        segments = await self._load_segments(schedule, session)

        if session is not self.session or not self.state_updater.is_selected(session.session_id):
            logger.debug(f"Discarding segments for {session.train_code}: session changed")
            return False

        self.segments = segments
        self._segments_due = False
        self.snapshot = None
        logger.info(
            f"Loaded {len(segments)} segment(s) for {schedule.train_code} "
            f"on {session.selected_date}"
        )

        self.tick()
        await self._arm_alarm()
        return True

    async def _load_segments(
        self, schedule: TrainSchedule, session: TrackingSession
    ) -> list[Segment]:
        if self.journey_repository is None or not schedule.train_id:
            return []
        try:
            return await self.journey_repository.fetch_segments_for_train(
                schedule.train_id, session.selected_date
            )
        except Exception as e:
            logger.warning(
                f"Failed to fetch segments for {schedule.train_code}, "
                f"projecting from stop times instead: {e}"
            )
            return []

    def _schedule_retry(self) -> None:
        self._next_fetch_at = self._clock() + timedelta(seconds=self.config.schedule_retry_seconds)

    def tick(self, now: datetime | None = None) -> TrackingSnapshot | None:
        """Recompute and publish state for the current instant.

        Returns:
            The new snapshot, or None when the session is no longer selected.
        """
        if not self.state_updater.is_selected(self.session_id):
            return None

        now = now or self._clock()
        selected_date = self.session.selected_date
        if self.snapshot is None:
            snapshot = self.engine.recompute(self.schedule, selected_date, now, self.segments)
        else:
            snapshot = self.engine.refresh(
                self.snapshot, self.schedule, selected_date, now, self.segments
            )
        self.snapshot = snapshot

        self.state_updater.update_timeline(snapshot.items, snapshot.phase)
        if self.schedule is not None:
            # Keep a restored projection until real data is available.
            self.state_updater.update_projection(snapshot.projection)
        self.state_updater.update_last_update_time(now)

        if snapshot.projection is not None:
            self._save_projection(snapshot)
        return snapshot

    def _restore_cached_projection(self) -> None:
        if self.snapshot_cache is None:
            return
        cached = self.snapshot_cache.load(self.session_id)
        if cached is not None:
            logger.info(f"Restored cached projection for {self.session_id}")
            self.state_updater.update_projection(cached)

    def _save_projection(self, snapshot: TrackingSnapshot) -> None:
        if self.snapshot_cache is None or snapshot.projection is None:
            return
        projection = snapshot.projection
        key = (
            projection.from_station.id if projection.from_station else None,
            projection.to_station.id if projection.to_station else None,
            projection.moving,
        )
        if key == self._last_saved_key:
            return
        self.snapshot_cache.save(self.session_id, projection)
        self._last_saved_key = key

    async def _arm_alarm(self) -> None:
        offset = self.session.alarm_offset_minutes
        if self.alarm_service is None or offset is None or self._alarm_armed:
            return
        if self.snapshot is None:
            return

        now = self._clock()
        destination_id = self.session.destination_station_id
        result = self.engine.validate_alarm(self.snapshot, offset, now, destination_id)
        if result is None:
            return
        if not result.is_valid:
            logger.warning(
                f"Not scheduling alarm for {self.session_id}: {result.reason.value} "
                f"(offset {offset} min, {result.minutes_until_arrival} min until arrival)"
            )
            return

        window = self.engine.alarm_window(self.snapshot, destination_id)
        if window is None:
            return
        _, arrival = window
        stops = [item.stop_ref.stop for item in self.snapshot.items]
        destination = next(
            (s for s in stops if destination_id and s.station_id == destination_id), stops[-1]
        )
        try:
            await self.alarm_service.schedule_arrival_alarm(
                activity_id=self.session_id,
                arrival_time=arrival,
                now=now,
                train_name=self.schedule.train_name if self.schedule else self.session.train_code,
                destination_name=destination.station_name,
                destination_code=destination.station_code,
                offset_minutes=offset,
            )
        except AlarmSchedulingError as e:
            logger.error(f"Could not schedule alarm for {self.session_id}: {e}")
            return
        self._alarm_armed = True
