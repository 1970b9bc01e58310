"""Alarm metadata domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AlarmMetadata:
    """Content handed to the OS alarm collaborator for an arrival alarm."""

    activity_id: str
    train_name: str
    destination_name: str
    destination_code: str
    offset_minutes: int
