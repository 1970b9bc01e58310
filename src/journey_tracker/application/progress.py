"""Fractional progress between two timestamps."""

from datetime import datetime


def interpolate_progress(
    start: datetime | None, end: datetime | None, now: datetime
) -> float | None:
    """Return how far `now` lies between `start` and `end`, clamped to [0, 1].

    Returns None when either bound is unknown. A window with `end <= start`
    counts as already arrived once `now` reaches `start`.
    """
    if start is None or end is None:
        return None
    if now < start:
        return 0.0
    if now >= end:
        return 1.0

    total = (end - start).total_seconds()
    if total <= 0:
        return 1.0

    elapsed = (now - start).total_seconds()
    return min(max(elapsed / total, 0.0), 1.0)
