"""Alarm scheduling error."""


class AlarmSchedulingError(Exception):
    """Raised when an arrival alarm cannot be registered."""
