"""
Core event primitives.

- Event: immutable emitted record
- Canonical: compact JSON wire encoding
- Errors: exception taxonomy
"""

from .events import Event
from .canonical import canonicalize, canonical_json_str, encode_event, decode_line
from .errors import EventgenError, StreamWriteError, MalformedRecordError, SequenceError

__all__ = [
    "Event",
    "canonicalize",
    "canonical_json_str",
    "encode_event",
    "decode_line",
    "EventgenError",
    "StreamWriteError",
    "MalformedRecordError",
    "SequenceError",
]
