"""Adapters exposing third-party byte sources as bytestream streams."""

from .httpx import ResponseBodyStream

__all__ = ["ResponseBodyStream"]
