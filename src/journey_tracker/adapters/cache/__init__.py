"""Snapshot cache adapters."""

from journey_tracker.adapters.cache.snapshot_cache import ProjectionSnapshotCache

__all__ = ["ProjectionSnapshotCache"]
