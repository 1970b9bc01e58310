"""Protocol for the live refresh loop."""

from typing import Protocol


class RefreshLoopProtocol(Protocol):
    """Protocol for periodically recomputing tracking state."""

    async def start(self) -> None:
        """Start the refresh loop."""
        ...

    async def stop(self) -> None:
        """Stop the refresh loop and wait for it to finish."""
        ...

    def cancel(self) -> None:
        """Stop ticking immediately; no later tick may write state."""
        ...
