"""Buffered payload implementation.

This module provides Payload, which wraps a byte buffer or a readable stream
and lets the consumer either read it in chunks or buffer it entirely. The two
consumption modes are exclusive: once buffer() has been requested, read()
raises. A payload abandoned halfway through a stream drains the rest of the
stream in a detached task, so the stream is never left half-consumed.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import AsyncIterator

from bytestream.cancellation import await_cancellable
from bytestream.exceptions import (
    ClosedError,
    PayloadConsumedError,
    PendingReadError,
    StreamError,
)
from bytestream.interfaces import ICancellation, IReadableStream, IScheduler
from bytestream.scheduling import default_scheduler
from bytestream.streams import ReadableBuffer

logger = logging.getLogger(__name__)


class PayloadState(enum.Enum):
    """Lifecycle of a payload."""

    UNCONSUMED = "unconsumed"
    STREAMING = "streaming"
    CONSUMED = "consumed"
    DRAINING = "draining"


def _retrieve(future: asyncio.Future) -> None:
    # Marks a failure as retrieved, it is re-raised to whoever awaits the future.
    if not future.cancelled():
        future.exception()


class Payload(IReadableStream):
    """Readable payload consumed either in chunks or as a whole.

    The payload wraps either bytes, treated as fully buffered from the start,
    or a live readable stream. Only one read may be pending on the stream at a
    time, so buffer() and the drain both wait for the last read to finish
    before reading again.

    Each read of the stream runs in its own task. A cancellation passed to
    read() only abandons the caller's wait: the stream read goes on, and its
    chunk is handed to the next read(), to buffer(), or discarded by the drain.

    Example:
        >>> async with Payload(stream) as payload:
        ...     first = await payload.read()
        ...     # leaving the block drains whatever was not read

    Attributes:
        _data: The materialized buffer, None once handed out or for streams.
        _stream: The wrapped stream, None for materialized buffers.
        _last_read: The last read issued to the stream; resolves to the chunk,
            None at the end of the stream.
        _unclaimed: The last read while its chunk has not been returned to a
            caller yet.
        _reading: Whether a caller is currently waiting in read().
        _buffered: The memoized whole-buffer request.
        _scheduler: Runs the detached drain.
    """

    def __init__(
        self,
        source: bytes | bytearray | memoryview | IReadableStream,
        *,
        scheduler: IScheduler | None = None,
    ) -> None:
        """Initialize the payload.

        Args:
            source: Bytes to expose as a single chunk, or a stream to wrap.
                A ReadableBuffer is unwrapped into its bytes.
            scheduler: Scheduler for the detached drain. Defaults to the
                module wide TaskScheduler.
        """
        self._data: bytes | None = None
        self._stream: IReadableStream | None = None
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._data = bytes(source)
        elif isinstance(source, ReadableBuffer):
            self._data = source.take()
        else:
            self._stream = source

        self._state = PayloadState.UNCONSUMED
        self._last_read: asyncio.Future[bytes | None] | None = None
        self._unclaimed: asyncio.Future[bytes | None] | None = None
        self._reading = False
        self._buffered: asyncio.Future[bytes] | None = None
        self._scheduler = scheduler if scheduler is not None else default_scheduler
        self._closed = False

    def __del__(self) -> None:
        # Partially initialized instances have nothing to drain.
        if "_closed" in self.__dict__:
            self.close()

    async def __aenter__(self) -> Payload:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    @property
    def state(self) -> PayloadState:
        """The current lifecycle state."""
        return self._state

    async def read(self, cancellation: ICancellation | None = None) -> bytes | None:
        """Read the next chunk of the payload.

        Args:
            cancellation: Optional token governing the wait. Cancelling it
                does not cancel the read issued to the wrapped stream.

        Returns:
            The next chunk, or None at the end of the payload. A buffer-backed
            payload returns its whole buffer on the first call.

        Raises:
            PayloadConsumedError: If buffer() has already been requested.
            ClosedError: If the payload has been closed.
            PendingReadError: If another read() is still waiting.
            OperationCancelledError: If the cancellation was triggered first.
        """
        if self._buffered is not None:
            raise PayloadConsumedError(
                "Cannot stream payload data once a buffered payload has been requested"
            )
        if self._closed:
            raise ClosedError("The payload has been closed")

        if self._stream is None:
            data, self._data = self._data, None
            self._state = PayloadState.CONSUMED
            return data

        if self._reading:
            raise PendingReadError()
        if cancellation is not None:
            cancellation.throw_if_requested()

        # Resume the read abandoned by a cancelled caller, if any.
        read = self._unclaimed
        if read is None:
            read = asyncio.ensure_future(self._stream.read())
            read.add_done_callback(_retrieve)
            self._last_read = self._unclaimed = read
        if self._state is PayloadState.UNCONSUMED:
            self._state = PayloadState.STREAMING

        self._reading = True
        try:
            chunk = await await_cancellable(read, cancellation)
        except BaseException:
            if read.done():
                self._unclaimed = None
            raise
        finally:
            self._reading = False

        self._unclaimed = None
        if chunk is None and self._state is PayloadState.STREAMING:
            self._state = PayloadState.CONSUMED
        return chunk

    def is_readable(self) -> bool:
        if self._closed:
            return False
        if self._stream is None:
            return self._data is not None
        return self._stream.is_readable()

    async def buffer(self, cancellation: ICancellation | None = None) -> bytes:
        """Buffer the entire payload and return it.

        Repeated calls return the same result without reading again. The
        cancellation only abandons this call's wait; buffering continues in
        the background and a later call can still collect the result.

        Args:
            cancellation: Optional token governing the wait.

        Returns:
            The entire payload, or whatever was not read yet if chunks were
            already read.

        Raises:
            ClosedError: If the payload was closed before buffering.
            OperationCancelledError: If the cancellation was triggered first.
        """
        if self._buffered is None:
            if self._closed:
                raise ClosedError("The payload has been closed")

            if self._stream is None:
                self._buffered = asyncio.get_running_loop().create_future()
                self._buffered.set_result(self._data or b"")
                self._data = None
                self._state = PayloadState.CONSUMED
            else:
                self._buffered = asyncio.ensure_future(
                    self._consume(self._stream, self._last_read)
                )
                self._buffered.add_done_callback(_retrieve)

        return await await_cancellable(self._buffered, cancellation)

    def close(self) -> None:
        """Release the payload.

        If the wrapped stream was read from but neither buffered nor read to
        its end, the rest of the stream is drained in a detached task.
        Closing is idempotent.
        """
        if self._closed:
            return
        self._closed = True
        self._data = None

        if (
            self._stream is None
            or self._buffered is not None
            or self._last_read is None
            or self._state is not PayloadState.STREAMING
        ):
            return

        if self._scheduler.schedule(self._drain(self._stream, self._last_read)):
            self._state = PayloadState.DRAINING

    async def _iterate(self) -> AsyncIterator[bytes]:
        while (chunk := await self.read()) is not None:
            yield chunk

    async def _consume(
        self, stream: IReadableStream, last_read: asyncio.Future[bytes | None] | None
    ) -> bytes:
        chunks = []
        if last_read is not None:
            if last_read.cancelled():
                raise StreamError("The previous read was cancelled before buffering")
            chunk = await last_read
            if chunk is None:
                self._state = PayloadState.CONSUMED
                return b""
            # Keep the chunk of a read whose caller stopped waiting for it.
            if not self._reading and self._unclaimed is last_read:
                self._unclaimed = None
                chunks.append(chunk)

        while (chunk := await stream.read()) is not None:
            chunks.append(chunk)

        self._state = PayloadState.CONSUMED
        return b"".join(chunks)

    @staticmethod
    async def _drain(
        stream: IReadableStream, last_read: asyncio.Future[bytes | None]
    ) -> None:
        # Owns only the stream and the last read, never the payload itself.
        try:
            if last_read.cancelled() or await last_read is None:
                return

            discarded = 0
            while (chunk := await stream.read()) is not None:
                discarded += len(chunk)
            logger.debug("Drained %d unread payload bytes", discarded)
        except Exception:
            # The stream has failed or closed, so it is finished anyway.
            logger.debug("Payload stream failed while draining", exc_info=True)
