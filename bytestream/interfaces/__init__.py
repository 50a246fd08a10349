"""Bytestream interfaces package.

This package provides protocol definitions for readable and writable streams,
cancellation tokens, and detached task scheduling.
"""

from .cancellation import ICancellation
from .io import IReadableStream, IWritableStream
from .scheduling import IScheduler

__all__ = [
    # cancellation
    "ICancellation",
    # io
    "IReadableStream",
    "IWritableStream",
    # scheduling
    "IScheduler",
]
