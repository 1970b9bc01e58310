"""Journey (tracking session) configuration loader."""

import logging
from datetime import date, datetime
from typing import Any

from journey_tracker.adapters.config.app_config import AppConfig
from journey_tracker.domain.models.tracking_session import TrackingSession

logger = logging.getLogger(__name__)


class JourneyConfigurationLoader:
    """Loads tracking sessions from app config."""

    @staticmethod
    def _parse_date(value: Any, today: date) -> date:
        if value is None or value == "" or value == "today":
            return today
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value))

    @staticmethod
    def load_session_from_data(
        data: dict[str, Any], config: AppConfig, index: int, today: date
    ) -> TrackingSession | None:
        """Load a single session from a [[journeys]] table.

        Raises ValueError for an invalid date or alarm offset.
        """
        train_code = data.get("train_code")
        if not train_code:
            logger.warning(f"Skipping journey #{index}: missing train_code")
            return None

        selected_date = JourneyConfigurationLoader._parse_date(data.get("selected_date"), today)

        offset = data.get("alarm_offset_minutes")
        if offset is None and config.alarm_enabled:
            offset = config.alarm_default_offset_minutes
        if offset is not None:
            offset = int(offset)
            if not 1 <= offset <= 60:
                raise ValueError(f"Journey {train_code}: alarm_offset_minutes must be 1..60")

        destination = data.get("destination_station_id")
        return TrackingSession(
            session_id=str(data.get("session_id") or f"{train_code}-{selected_date.isoformat()}"),
            train_code=str(train_code),
            selected_date=selected_date,
            alarm_offset_minutes=offset,
            destination_station_id=str(destination) if destination else None,
        )

    @staticmethod
    def load(config: AppConfig, today: date | None = None) -> list[TrackingSession]:
        """Load all configured tracking sessions.

        Raises ValueError if two sessions share the same id.
        """
        today = today or datetime.now(config.timezone_info).date()
        sessions: list[TrackingSession] = []
        for index, data in enumerate(config.get_journeys_config()):
            session = JourneyConfigurationLoader.load_session_from_data(data, config, index, today)
            if session is not None:
                sessions.append(session)

        ids = [s.session_id for s in sessions]
        if len(ids) != len(set(ids)):
            duplicates = {i for i in ids if ids.count(i) > 1}
            raise ValueError(f"Journey session ids must be unique. Duplicates: {duplicates}")
        return sessions
