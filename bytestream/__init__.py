"""Bytestream: streaming transformations over asyncio byte streams.

This package provides incremental base64 codecs that sit in line with a
stream, and a Payload adapter that lets a consumer read a stream either in
chunks or as a single buffer while never leaving it half-consumed.

Main Components:
    - Base64EncodingReadableStream: Encodes data read from a source
    - Base64EncodingWritableStream: Encodes data before writing it to a sink
    - Base64DecodingWritableStream: Strictly decodes data before writing it to a sink
    - Payload: Chunked or buffered consumption of a stream
    - Interfaces: Protocol definitions for streams, cancellation, scheduling

Example:
    >>> from bytestream import Payload, ReadableIterableStream
    >>> payload = Payload(ReadableIterableStream([b"ab", b"cd"]))
    >>> await payload.buffer()
    b'abcd'
"""

from bytestream.cancellation import (
    DeferredCancellation,
    TimeoutCancellation,
    await_cancellable,
)
from bytestream.encoding import (
    Base64DecodingWritableStream,
    Base64EncodingReadableStream,
    Base64EncodingWritableStream,
)
from bytestream.exceptions import (
    ByteStreamError,
    ClosedError,
    DecodingError,
    OperationCancelledError,
    PayloadConsumedError,
    PendingReadError,
    StreamError,
)
from bytestream.functions import buffer, pipe
from bytestream.payload import Payload, PayloadState
from bytestream.scheduling import TaskScheduler
from bytestream.streams import ReadableBuffer, ReadableIterableStream, WritableBuffer

__version__ = "0.1.0"

__all__ = [
    # Codecs
    "Base64DecodingWritableStream",
    "Base64EncodingReadableStream",
    "Base64EncodingWritableStream",
    # Payload
    "Payload",
    "PayloadState",
    # Streams
    "ReadableBuffer",
    "ReadableIterableStream",
    "WritableBuffer",
    "buffer",
    "pipe",
    # Cancellation and scheduling
    "DeferredCancellation",
    "TimeoutCancellation",
    "await_cancellable",
    "TaskScheduler",
    # Exceptions
    "ByteStreamError",
    "StreamError",
    "DecodingError",
    "ClosedError",
    "PendingReadError",
    "PayloadConsumedError",
    "OperationCancelledError",
]
