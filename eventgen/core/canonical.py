"""
JSON encoding for the event stream.

Events go out as compact single-line JSON objects. Reports use the
sorted-key canonical form so they compare byte-for-byte.
"""

import json
from typing import Any, Union

from .errors import MalformedRecordError
from .events import Event


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested dict/list to canonical form.

    Rules:
    - dict keys sorted alphabetically
    - tuples converted to lists
    - recursive normalization
    """
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_str(obj: Any) -> str:
    """Sorted-key JSON string without whitespace."""
    canon = canonicalize(obj)
    return json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def encode_event(event: Event) -> str:
    """
    Encode one event as a single JSON line (no trailing newline).

    Guarantees:
    - key order eventId, message
    - separators remove whitespace
    - ensure_ascii=False writes non-ASCII labels as UTF-8
    """
    return json.dumps(event.to_dict(), separators=(",", ":"), ensure_ascii=False)


def decode_line(line: Union[str, bytes]) -> Event:
    """
    Decode one NDJSON line into an Event.

    Raises:
        MalformedRecordError: If the line is not valid UTF-8 JSON or not an event
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecordError(f"line is not valid UTF-8: {e}") from e
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(f"invalid JSON: {e}") from e
    return Event.from_dict(data)
