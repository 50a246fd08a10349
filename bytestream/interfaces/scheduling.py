"""Scheduling interfaces for bytestream."""

from __future__ import annotations

from typing import Any, Coroutine, Protocol


class IScheduler(Protocol):
    """Interface for running detached units of work."""

    def schedule(self, coroutine: Coroutine[Any, Any, None]) -> bool:
        """Run a coroutine independently of the caller.

        Args:
            coroutine: The work to run. It is closed if it cannot be scheduled.

        Returns:
            True if the work was scheduled.
        """
        ...
