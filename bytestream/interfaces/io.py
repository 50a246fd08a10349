"""Stream I/O interfaces for bytestream.

This module defines protocols for readable byte sources and writable byte sinks.
"""

from __future__ import annotations

from typing import Protocol

from .cancellation import ICancellation


class IReadableStream(Protocol):
    """Interface for readable byte sources."""

    async def read(self, cancellation: ICancellation | None = None) -> bytes | None:
        """Read the next chunk of data.

        Only one read may be pending at a time.

        Args:
            cancellation: Optional token abandoning the read when triggered.

        Returns:
            The next chunk, or None once the end of the stream is reached.
            Every read after the end of the stream also returns None.

        Raises:
            PendingReadError: If another read is still pending.
            OperationCancelledError: If the cancellation was triggered.
        """
        ...

    def is_readable(self) -> bool:
        """Whether the stream may still produce data.

        Returns:
            False once the stream is known to be exhausted or closed.
        """
        ...


class IWritableStream(Protocol):
    """Interface for writable byte sinks."""

    async def write(self, data: bytes) -> None:
        """Write data to the sink.

        Callers should await each write before issuing the next one.

        Args:
            data: The bytes to write.

        Raises:
            ClosedError: If the sink has already been ended.
        """
        ...

    async def end(self, data: bytes = b"") -> None:
        """Write final data and close the sink.

        Args:
            data: Optional bytes written before closing.
        """
        ...

    def is_writable(self) -> bool:
        """Whether the sink still accepts writes."""
        ...
