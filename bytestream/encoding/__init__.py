"""Streaming encoders and decoders for bytestream."""

from .base64 import (
    Base64DecodingWritableStream,
    Base64EncodingReadableStream,
    Base64EncodingWritableStream,
)

__all__ = [
    "Base64DecodingWritableStream",
    "Base64EncodingReadableStream",
    "Base64EncodingWritableStream",
]
