"""Registry of scheduled alarm handles keyed by tracking activity."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class AlarmRegistry:
    """Maps activity ids to OS alarm handles.

    Every operation runs under one asyncio.Lock, so the refresh path and alarm
    completion callbacks never observe a partially updated mapping. The
    underlying dict is never exposed.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._handles: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, activity_id: str) -> str | None:
        """Return the alarm handle for an activity."""
        async with self._lock:
            return self._handles.get(activity_id)

    async def set(self, activity_id: str, handle: str) -> str | None:
        """Store a handle and return the one it replaced, if any."""
        async with self._lock:
            previous = self._handles.get(activity_id)
            self._handles[activity_id] = handle
            return previous

    async def remove(self, activity_id: str) -> str | None:
        """Remove and return the handle for an activity."""
        async with self._lock:
            return self._handles.pop(activity_id, None)

    async def pop_all(self) -> dict[str, str]:
        """Remove every entry and return a copy of what was registered."""
        async with self._lock:
            entries = dict(self._handles)
            self._handles.clear()
            return entries

    async def find_activity(self, handle: str) -> str | None:
        """Return the activity id that owns a handle."""
        async with self._lock:
            for activity_id, stored in self._handles.items():
                if stored == handle:
                    return activity_id
            return None

    async def count(self) -> int:
        """Number of registered alarms."""
        async with self._lock:
            return len(self._handles)
