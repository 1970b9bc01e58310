"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from datetime import tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from journey_tracker.domain.models.journey_phase import PhasePolicy


def _positive_interval(v: float) -> float:
    if v <= 0:
        raise ValueError("intervals must be greater than 0 seconds")
    return v


def _known_timezone(v: str) -> str:
    try:
        ZoneInfo(v)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"timezone must be a valid IANA timezone name, got {v!r}") from e
    return v


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend configuration
    backend_url: str = Field(
        default="http://localhost:3210", description="Base URL of the schedule backend"
    )
    backend_timeout_seconds: float = Field(
        default=10, description="Timeout for backend requests in seconds"
    )

    # Tracking configuration
    refresh_interval_seconds: float = Field(
        default=1.0, description="Interval between live timeline/position refreshes in seconds"
    )
    schedule_retry_seconds: float = Field(
        default=15, description="Delay before retrying a failed schedule fetch in seconds"
    )
    timezone: str = Field(
        default="Asia/Jakarta",
        description="Timezone of schedule wall-clock times (IANA timezone name)",
    )
    phase_policy: PhasePolicy = Field(
        default=PhasePolicy.CALENDAR,
        description=(
            "Journey phase policy: 'calendar', 'calendar_running' "
            "(overnight start only while still running) or 'schedule'"
        ),
    )
    snapshot_cache_path: str | None = Field(
        default=None,
        description="JSON file for the last projected train snapshot (disabled when unset)",
    )

    # Alarm configuration
    alarm_enabled: bool = Field(default=True, description="Schedule arrival alarms by default")
    alarm_default_offset_minutes: int = Field(
        default=10, description="Default minutes before arrival for the alarm"
    )

    # TOML config file path with [[journeys]] to track
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file listing journeys to track",
    )

    @field_validator("refresh_interval_seconds", "schedule_retry_seconds")
    @classmethod
    def validate_positive_interval(cls, v: float) -> float:
        """Validate intervals are strictly positive."""
        return _positive_interval(v)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate the timezone is a known IANA name."""
        return _known_timezone(v)

    @field_validator("alarm_default_offset_minutes")
    @classmethod
    def validate_alarm_offset(cls, v: int) -> int:
        """Validate the alarm offset is between 1 and 60 minutes."""
        if not 1 <= v <= 60:
            raise ValueError("alarm_default_offset_minutes must be between 1 and 60")
        return v

    @property
    def timezone_info(self) -> tzinfo:
        """Timezone object for the configured timezone."""
        return ZoneInfo(self.timezone)

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, applying [tracking] overrides."""
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        tracking = toml_data.get("tracking", {})
        if isinstance(tracking, dict):
            if "refresh_interval_seconds" in tracking:
                self.refresh_interval_seconds = _positive_interval(
                    float(tracking["refresh_interval_seconds"])
                )
            if "phase_policy" in tracking:
                self.phase_policy = PhasePolicy(tracking["phase_policy"])
            if "timezone" in tracking:
                self.timezone = _known_timezone(tracking["timezone"])

        return toml_data

    def get_journeys_config(self) -> list[dict[str, Any]]:
        """Parse and return the [[journeys]] entries from the TOML file.

        Raises ValueError if journeys is not a list of tables.
        """
        toml_data = self._load_toml_data()
        journeys = toml_data.get("journeys", [])
        if not isinstance(journeys, list):
            raise ValueError("TOML config 'journeys' must be a list")
        return [j for j in journeys if isinstance(j, dict)]
