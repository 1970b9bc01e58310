"""Ports (interfaces) for the ports-and-adapters architecture."""

from journey_tracker.domain.ports.alarm_scheduler import AlarmScheduler
from journey_tracker.domain.ports.arrival_alarm_service import ArrivalAlarmService
from journey_tracker.domain.ports.journey_repository import JourneyRepository
from journey_tracker.domain.ports.schedule_repository import ScheduleRepository
from journey_tracker.domain.ports.station_repository import StationRepository
from journey_tracker.domain.ports.tracking_engine import TrackingEngine

__all__ = [
    "AlarmScheduler",
    "ArrivalAlarmService",
    "JourneyRepository",
    "ScheduleRepository",
    "StationRepository",
    "TrackingEngine",
]
