"""
Event model for the emitted stream.

An Event is built right before it is written and is not kept afterwards.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import MalformedRecordError

EVENT_KEYS = ("eventId", "message")


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Fields:
        event_id: Counter value, 1 for the first event of a run
        message: "<label> <event_id>"
    """
    event_id: int
    message: str

    @classmethod
    def build(cls, label: Optional[str], event_id: int) -> "Event":
        """
        Build the event for one cycle.

        A missing label renders as the empty string, giving " <event_id>".
        The label is used verbatim.
        """
        prefix = "" if label is None else label
        return cls(event_id=event_id, message=f"{prefix} {event_id}")

    def to_dict(self) -> Dict[str, Any]:
        """Wire form, keys in emission order."""
        return {"eventId": self.event_id, "message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        """
        Parse the wire form back into an Event.

        Raises:
            MalformedRecordError: If data is not an object with exactly
                an integer eventId >= 1 and a string message
        """
        if not isinstance(data, dict):
            raise MalformedRecordError(f"expected JSON object, got {type(data).__name__}")
        if set(data.keys()) != set(EVENT_KEYS):
            raise MalformedRecordError(f"expected keys {list(EVENT_KEYS)}, got {sorted(data.keys())}")

        event_id = data["eventId"]
        message = data["message"]
        # bool is an int subclass
        if isinstance(event_id, bool) or not isinstance(event_id, int) or event_id < 1:
            raise MalformedRecordError(f"eventId must be an integer >= 1, got {event_id!r}")
        if not isinstance(message, str):
            raise MalformedRecordError(f"message must be a string, got {message!r}")
        return cls(event_id=event_id, message=message)
