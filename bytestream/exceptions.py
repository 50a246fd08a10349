"""Exception classes for bytestream.

This module defines custom exception types used throughout the bytestream library.
"""

from __future__ import annotations


class ByteStreamError(Exception):
    """Base exception class for all bytestream errors."""

    pass


class StreamError(ByteStreamError):
    """Exception raised when a stream operation fails."""

    pass


class DecodingError(StreamError):
    """Exception raised when encoded input is corrupt.

    Attributes:
        offset: Number of encoded bytes decoded successfully before the
            corrupt block was found.
    """

    def __init__(self, offset: int) -> None:
        super().__init__(f"Invalid base64 near offset {offset}")
        self.offset = offset


class ClosedError(StreamError):
    """Exception raised when using a stream or payload that has been closed."""

    pass


class PendingReadError(ByteStreamError):
    """Exception raised when a read is issued while another is still pending."""

    def __init__(self, message: str = "The previous read operation must complete first") -> None:
        super().__init__(message)


class PayloadConsumedError(ByteStreamError):
    """Exception raised when streaming a payload after buffering was requested."""

    pass


class OperationCancelledError(ByteStreamError):
    """Exception raised when a cancellation token has been triggered.

    Attributes:
        reason: Human readable reason given when cancelling.
    """

    def __init__(self, reason: str = "The operation was cancelled") -> None:
        super().__init__(reason)
        self.reason = reason
