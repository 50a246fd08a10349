"""Cancellation interfaces for bytestream."""

from __future__ import annotations

from typing import Protocol


class ICancellation(Protocol):
    """Interface for cancellation tokens passed to awaiting operations."""

    @property
    def is_requested(self) -> bool:
        """Whether cancellation has been requested."""
        ...

    @property
    def reason(self) -> str:
        """The reason given for the cancellation."""
        ...

    def throw_if_requested(self) -> None:
        """Raise if cancellation has been requested.

        Raises:
            OperationCancelledError: If cancellation has been requested.
        """
        ...

    async def wait(self) -> None:
        """Wait until cancellation is requested."""
        ...
