"""
eventgen - newline-delimited JSON event emitter.

This package provides:
- Event: the emitted record
- Emitter: the once-per-second stdout/stderr loop
- scan: NDJSON record scanning and stream checks
"""

from .core import Event, encode_event, decode_line
from .emitter import Emitter, DEFAULT_INTERVAL

__version__ = "0.1.0"

__all__ = [
    "Event",
    "encode_event",
    "decode_line",
    "Emitter",
    "DEFAULT_INTERVAL",
]
