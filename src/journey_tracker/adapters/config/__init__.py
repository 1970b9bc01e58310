"""Configuration adapters."""

from journey_tracker.adapters.config.app_config import AppConfig
from journey_tracker.adapters.config.journey_configuration_loader import (
    JourneyConfigurationLoader,
)

__all__ = ["AppConfig", "JourneyConfigurationLoader"]
