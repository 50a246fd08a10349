"""Streaming base64 codecs.

This module provides stream wrappers that encode or decode standard base64
(RFC 4648, with padding) incrementally, one chunk at a time. Each wrapper keeps
a block buffer holding the tail of the data that is not yet aligned to the
codec's block size: 3 raw bytes for encoding, 4 encoded bytes for decoding.
The wrapped stream is not owned by the wrapper.
"""

from __future__ import annotations

import base64
import binascii

from bytestream.exceptions import DecodingError
from bytestream.interfaces import ICancellation, IReadableStream, IWritableStream

_RAW_BLOCK_SIZE = 3
_ENCODED_BLOCK_SIZE = 4


def _split_aligned(buffer: bytes, block_size: int) -> tuple[bytes, bytes]:
    """Split a buffer into its longest block aligned prefix and the remainder."""
    length = len(buffer) - len(buffer) % block_size
    return buffer[:length], buffer[length:]


class Base64EncodingReadableStream(IReadableStream):
    """Readable stream encoding the data read from a source as base64.

    Each read returns the encoding of every complete 3 byte group read so far.
    Once the source is exhausted, the remaining 0 to 2 bytes are returned
    padded, and every later read returns None.

    Example:
        >>> stream = Base64EncodingReadableStream(ReadableIterableStream([b"he", b"llo"]))
        >>> await buffer(stream)
        b'aGVsbG8='
    """

    def __init__(self, source: IReadableStream) -> None:
        self._source = source
        # None once the final chunk has been returned.
        self._buffer: bytes | None = b""

    async def read(self, cancellation: ICancellation | None = None) -> bytes | None:
        if self._buffer is None:
            return None

        chunk = await self._source.read(cancellation)
        if chunk is None:
            encoded = base64.b64encode(self._buffer)
            self._buffer = None
            return encoded

        aligned, self._buffer = _split_aligned(self._buffer + chunk, _RAW_BLOCK_SIZE)
        return base64.b64encode(aligned)

    def is_readable(self) -> bool:
        return self._buffer is not None


class Base64EncodingWritableStream(IWritableStream):
    """Writable stream encoding written data as base64 before forwarding it.

    Every write forwards exactly one write to the destination, and end()
    forwards exactly one end() carrying the padded remainder.
    """

    def __init__(self, destination: IWritableStream) -> None:
        self._destination = destination
        self._buffer = b""

    async def write(self, data: bytes) -> None:
        aligned, self._buffer = _split_aligned(self._buffer + data, _RAW_BLOCK_SIZE)
        await self._destination.write(base64.b64encode(aligned))

    async def end(self, data: bytes = b"") -> None:
        encoded = base64.b64encode(self._buffer + data)
        self._buffer = b""
        await self._destination.end(encoded)

    def is_writable(self) -> bool:
        return self._destination.is_writable()


class Base64DecodingWritableStream(IWritableStream):
    """Writable stream decoding written base64 data before forwarding it.

    Decoding is strict: bytes outside the base64 alphabet (whitespace
    included), misplaced padding, and a final fragment that is not a padded
    multiple of 4 bytes all raise DecodingError. A decoding failure is fatal,
    every later write or end raises again and nothing more is forwarded.

    Attributes:
        _buffer: Encoded bytes not yet aligned to a 4 byte block.
        _offset: Number of encoded bytes decoded so far.
        _padded: Whether a padded block has already been decoded.
        _failure: Offset of the decoding failure, once one occurred.
    """

    def __init__(self, destination: IWritableStream) -> None:
        self._destination = destination
        self._buffer = b""
        self._offset = 0
        self._padded = False
        self._failure: int | None = None

    async def write(self, data: bytes) -> None:
        """Decode the complete blocks received so far and forward them.

        Args:
            data: Base64 encoded bytes.

        Raises:
            DecodingError: If the input is not valid base64.
        """
        aligned, remainder = _split_aligned(self._buffer + data, _ENCODED_BLOCK_SIZE)
        chunk = self._decode(aligned)
        self._offset += len(aligned)
        self._buffer = remainder
        await self._destination.write(chunk)

    async def end(self, data: bytes = b"") -> None:
        """Decode everything left, forward it and end the destination.

        Args:
            data: Final base64 encoded bytes.

        Raises:
            DecodingError: If the remaining input is not valid, padded base64.
        """
        final = self._buffer + data
        chunk = self._decode(final)
        self._offset += len(final)
        self._buffer = b""
        await self._destination.end(chunk)

    def is_writable(self) -> bool:
        return self._failure is None and self._destination.is_writable()

    @property
    def offset(self) -> int:
        """Number of encoded bytes decoded so far."""
        return self._offset

    def _decode(self, data: bytes) -> bytes:
        if self._failure is not None:
            raise DecodingError(self._failure)

        if not data:
            return b""

        try:
            if self._padded:
                raise binascii.Error("Data found after padding")
            decoded = base64.b64decode(data, validate=True)
        except binascii.Error as exc:
            self._failure = self._offset
            raise DecodingError(self._offset) from exc

        self._padded = data.endswith(b"=")
        return decoded
