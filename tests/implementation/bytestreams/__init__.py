"""Stream implementations for bytestream testing.

This module provides scripted sources, recording sinks and a recording
scheduler implementing the interfaces in bytestream.interfaces.
"""

from .scheduler import RecordingScheduler
from .sink import FailingSink, RecordingSink
from .source import ScriptedStream

__all__ = [
    # Sources
    "ScriptedStream",
    # Sinks
    "RecordingSink",
    "FailingSink",
    # Scheduling
    "RecordingScheduler",
]
