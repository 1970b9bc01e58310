"""Alarm scheduler adapters."""

from journey_tracker.adapters.alarms.logging_alarm_scheduler import LoggingAlarmScheduler

__all__ = ["LoggingAlarmScheduler"]
