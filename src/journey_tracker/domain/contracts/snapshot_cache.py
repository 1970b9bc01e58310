"""Protocol for the last-known projection snapshot cache."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from journey_tracker.domain.models.projected_train import ProjectedTrain


class SnapshotCacheProtocol(Protocol):
    """Protocol for persisting the last projected train for instant restore."""

    def load(self, session_id: str) -> "ProjectedTrain | None":
        """Return the cached snapshot for a session, if any."""
        ...

    def save(self, session_id: str, projection: "ProjectedTrain") -> None:
        """Store the snapshot for a session."""
        ...
