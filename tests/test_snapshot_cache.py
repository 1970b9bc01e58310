"""Tests for ProjectionSnapshotCache."""

import logging
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from journey_tracker.adapters.cache import ProjectionSnapshotCache
from journey_tracker.domain.models import Position, ProjectedTrain, Station

JAKARTA = ZoneInfo("Asia/Jakarta")


@pytest.fixture
def projection() -> ProjectedTrain:
    """A moving train between A and B."""
    return ProjectedTrain(
        id="train-7",
        code="7",
        name="Argo Parahyangan",
        position=Position(-6.05, 107.0),
        moving=True,
        bearing=180.0,
        speed_kph=22.2,
        from_station=Station(id="a", code="A", name="Station A", position=Position(-6.0, 107.0)),
        to_station=Station(id="b", code="B", name="Station B", position=Position(-6.1, 107.0)),
        segment_departure=datetime(2026, 3, 14, 8, 0, tzinfo=JAKARTA),
        segment_arrival=datetime(2026, 3, 14, 9, 0, tzinfo=JAKARTA),
        progress=0.5,
        journey_departure=datetime(2026, 3, 14, 8, 0, tzinfo=JAKARTA),
        journey_arrival=datetime(2026, 3, 14, 10, 0, tzinfo=JAKARTA),
    )


def test_saved_projection_survives_restart(tmp_path: Path, projection: ProjectedTrain) -> None:
    """Given a file-backed cache, when a new instance loads, then the projection is restored."""
    path = tmp_path / "cache" / "snapshots.json"
    ProjectionSnapshotCache(path, tz=JAKARTA).save("session-1", projection)

    restored = ProjectionSnapshotCache(path, tz=JAKARTA)

    assert path.exists()
    assert restored.get_all_session_ids() == {"session-1"}
    assert restored.load("session-1") == projection
    assert restored.load("session-2") is None


def test_in_memory_cache_writes_no_file(tmp_path: Path, projection: ProjectedTrain) -> None:
    """Given no path, when saving, then the projection is only kept in memory."""
    cache = ProjectionSnapshotCache()

    cache.save("session-1", projection)

    assert cache.load("session-1") == projection
    assert list(tmp_path.iterdir()) == []


def test_unreadable_file_is_ignored(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Given a corrupt cache file, when loading, then nothing is restored and a warning is logged."""
    path = tmp_path / "snapshots.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert ProjectionSnapshotCache(path).load("session-1") is None

    assert "Ignoring unreadable snapshot cache" in caplog.text


def test_non_object_file_is_ignored(tmp_path: Path) -> None:
    """Given a cache file holding a list, when loading, then nothing is restored."""
    path = tmp_path / "snapshots.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert ProjectionSnapshotCache(path).get_all_session_ids() == set()


def test_write_failure_does_not_raise(
    tmp_path: Path, projection: ProjectedTrain, caplog: pytest.LogCaptureFixture
) -> None:
    """Given an unwritable location, when saving, then the failure is logged and the entry kept."""
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    cache = ProjectionSnapshotCache(blocker / "snapshots.json")

    with caplog.at_level(logging.WARNING):
        cache.save("session-1", projection)

    assert "Failed to write snapshot cache" in caplog.text
    assert cache.load("session-1") == projection


def test_failed_replace_leaves_no_temporary_file(
    tmp_path: Path,
    projection: ProjectedTrain,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Given the final rename fails, when saving, then the temporary file is removed."""

    def fail_replace(src: str, dst: Path) -> None:
        raise OSError("device busy")

    monkeypatch.setattr("journey_tracker.adapters.cache.snapshot_cache.os.replace", fail_replace)
    path = tmp_path / "snapshots.json"
    cache = ProjectionSnapshotCache(path)

    with caplog.at_level(logging.WARNING):
        cache.save("session-1", projection)

    assert "Failed to write snapshot cache" in caplog.text
    assert list(tmp_path.iterdir()) == []
    assert cache.load("session-1") == projection
