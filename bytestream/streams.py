"""In-memory stream implementations for bytestream.

This module provides readable and writable streams backed by memory, useful
for composing pipelines and as reference implementations of the stream
interfaces.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from bytestream.exceptions import ClosedError, PendingReadError
from bytestream.interfaces import ICancellation, IReadableStream, IWritableStream


class ReadableBuffer(IReadableStream):
    """Readable stream returning a byte buffer in a single chunk."""

    def __init__(self, data: bytes = b"") -> None:
        self._data: bytes | None = bytes(data)

    async def read(self, cancellation: ICancellation | None = None) -> bytes | None:
        data, self._data = self._data, None
        return data

    def is_readable(self) -> bool:
        return self._data is not None

    def take(self) -> bytes | None:
        """Hand over the unread data without awaiting.

        Returns:
            The buffer, or None if it was already read.
        """
        data, self._data = self._data, None
        return data


class ReadableIterableStream(IReadableStream):
    """Readable stream producing the chunks of a sync or async iterable.

    Only one read may be pending at a time. If the iterable raises, the error
    propagates to the pending read and the stream is closed.

    Attributes:
        _iterator: The iterator producing chunks, or None once exhausted.
        _pending: Whether a read is currently in progress.
    """

    def __init__(self, iterable: Iterable[bytes] | AsyncIterable[bytes]) -> None:
        """Initialize the stream.

        Args:
            iterable: The chunks to produce, in order.
        """
        self._iterator: Iterator[bytes] | AsyncIterator[bytes] | None
        if isinstance(iterable, AsyncIterable):
            self._iterator = iterable.__aiter__()
        else:
            self._iterator = iter(iterable)
        self._pending = False

    async def read(self, cancellation: ICancellation | None = None) -> bytes | None:
        if self._pending:
            raise PendingReadError()

        if self._iterator is None:
            return None

        if cancellation is not None:
            cancellation.throw_if_requested()

        self._pending = True
        try:
            chunk = await self._next()
        except BaseException:
            self._iterator = None
            raise
        finally:
            self._pending = False

        if chunk is None:
            self._iterator = None
            return None

        return bytes(chunk)

    def is_readable(self) -> bool:
        return self._iterator is not None

    async def _next(self) -> bytes | None:
        iterator = self._iterator
        if isinstance(iterator, AsyncIterator):
            try:
                return await iterator.__anext__()
            except StopAsyncIteration:
                return None
        return next(iterator, None)  # type: ignore[arg-type]


class WritableBuffer(IWritableStream):
    """Writable stream collecting everything written to it in memory.

    Example:
        >>> sink = WritableBuffer()
        >>> await sink.write(b"ab")
        >>> await sink.end(b"cd")
        >>> await sink.buffer()
        b'abcd'
    """

    def __init__(self) -> None:
        self._contents = bytearray()
        self._ended: asyncio.Future[bytes] | None = None
        self._closed = False

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise ClosedError("The stream has already been closed")
        self._contents += data

    async def end(self, data: bytes = b"") -> None:
        await self.write(data)
        self._closed = True
        self._resolve()

    def is_writable(self) -> bool:
        return not self._closed

    async def buffer(self) -> bytes:
        """Wait until the stream has been ended and return its contents.

        Returns:
            Every byte written, in order.
        """
        if self._ended is None:
            self._ended = asyncio.get_running_loop().create_future()
            if self._closed:
                self._resolve()
        return await asyncio.shield(self._ended)

    def _resolve(self) -> None:
        if self._ended is not None and not self._ended.done():
            self._ended.set_result(bytes(self._contents))
