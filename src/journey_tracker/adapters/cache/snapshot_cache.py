"""Last-known projection cache, optionally persisted to a JSON file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import tzinfo
from pathlib import Path
from typing import TYPE_CHECKING, Any

from journey_tracker.adapters.backend_api.schedule_parser import ScheduleParser
from journey_tracker.domain.contracts.snapshot_cache import SnapshotCacheProtocol

if TYPE_CHECKING:
    from journey_tracker.domain.models.projected_train import ProjectedTrain
    from journey_tracker.domain.models.station import Station

logger = logging.getLogger(__name__)


def _station_to_dict(station: Station | None) -> dict[str, Any] | None:
    if station is None:
        return None
    return {
        "id": station.id,
        "code": station.code,
        "name": station.name,
        "city": station.city,
        "position": {
            "latitude": station.position.latitude,
            "longitude": station.position.longitude,
        },
    }


def projection_to_dict(projection: ProjectedTrain) -> dict[str, Any]:
    """Serialize a projection using the backend's projected-train field names."""

    def _iso(moment: Any) -> str | None:
        return moment.isoformat() if moment is not None else None

    return {
        "trainId": projection.id,
        "code": projection.code,
        "name": projection.name,
        "position": {
            "latitude": projection.position.latitude,
            "longitude": projection.position.longitude,
        },
        "moving": projection.moving,
        "bearing": projection.bearing,
        "speedKph": projection.speed_kph,
        "routeIdentifier": projection.route_id,
        "fromStation": _station_to_dict(projection.from_station),
        "toStation": _station_to_dict(projection.to_station),
        "segmentDeparture": _iso(projection.segment_departure),
        "segmentArrival": _iso(projection.segment_arrival),
        "progress": projection.progress,
        "journeyDeparture": _iso(projection.journey_departure),
        "journeyArrival": _iso(projection.journey_arrival),
    }


class ProjectionSnapshotCache(SnapshotCacheProtocol):
    """Cache of the last projected train per session.

    With a path, entries are loaded from and written back to a JSON file so a
    restart can show the last known position immediately. Cache failures are
    logged and never interrupt tracking.
    """

    def __init__(self, path: str | Path | None = None, tz: tzinfo | None = None) -> None:
        """Initialize the cache.

        Args:
            path: JSON file to persist to; in-memory only when None.
            tz: Timezone restored timestamps are converted to.
        """
        self._path = Path(path) if path else None
        self._tz = tz
        self._cache: dict[str, dict[str, Any]] = {}
        self._loaded = False

    def load(self, session_id: str) -> ProjectedTrain | None:
        """Get the cached projection for a session.

        Args:
            session_id: The tracking session id.

        Returns:
            The cached projection, or None if not found or unreadable.
        """
        self._ensure_loaded()
        entry = self._cache.get(session_id)
        if entry is None:
            return None
        parsed = ScheduleParser.parse_projected([entry], self._tz)
        return parsed[0] if parsed else None

    def save(self, session_id: str, projection: ProjectedTrain) -> None:
        """Store the projection for a session and persist the cache.

        Args:
            session_id: The tracking session id.
            projection: The projection to cache.
        """
        self._ensure_loaded()
        self._cache[session_id] = projection_to_dict(projection)
        self._write()

    def get_all_session_ids(self) -> set[str]:
        """Get all session ids that have cached data."""
        self._ensure_loaded()
        return set(self._cache.keys())

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if self._path is None or not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable snapshot cache {self._path}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Ignoring snapshot cache {self._path}: expected an object")
            return
        self._cache = {str(k): v for k, v in data.items() if isinstance(v, dict)}
        logger.debug(f"Loaded {len(self._cache)} cached snapshots from {self._path}")

    def _write(self) -> None:
        if self._path is None:
            return
        directory = self._path.parent
        tmp_path: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=directory, encoding="utf-8"
            ) as tmp:
                tmp_path = tmp.name
                json.dump(self._cache, tmp)
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.warning(f"Failed to write snapshot cache {self._path}: {e}")
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError as cleanup_error:
                    logger.debug(f"Could not remove temporary file {tmp_path}: {cleanup_error}")
