"""
Tests for the Event model.
"""

import pytest

from eventgen.core.errors import MalformedRecordError
from eventgen.core.events import Event


def test_build_message_with_label():
    """Message is label, one space, decimal eventId."""
    ev = Event.build("ping", 3)

    assert ev.event_id == 3
    assert ev.message == "ping 3"


def test_build_missing_label_renders_empty():
    """A missing label is the empty string: message starts with the space."""
    assert Event.build(None, 1).message == " 1"
    assert Event.build("", 2).message == " 2"


def test_build_label_is_opaque():
    """Labels are used verbatim, whitespace and all."""
    assert Event.build("  two words ", 7).message == "  two words  7"
    assert Event.build("--flag", 1).message == "--flag 1"


def test_to_dict_key_order():
    """Wire form lists eventId before message."""
    ev = Event.build("ping", 1)

    assert list(ev.to_dict().keys()) == ["eventId", "message"]


def test_event_is_immutable():
    """Events cannot be modified after construction."""
    ev = Event.build("ping", 1)

    with pytest.raises(Exception):
        ev.event_id = 2  # type: ignore


def test_from_dict_accepts_wire_form():
    """A well-formed record parses back into an Event."""
    assert Event.from_dict({"eventId": 4, "message": "x 4"}) == Event(4, "x 4")


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"eventId": 1},
        {"eventId": 1, "message": "a 1", "extra": True},
        {"eventId": 0, "message": " 0"},
        {"eventId": "1", "message": " 1"},
        {"eventId": True, "message": " 1"},
        {"eventId": 1, "message": 1},
    ],
)
def test_from_dict_rejects_bad_records(data):
    """Records with wrong keys or types are rejected."""
    with pytest.raises(MalformedRecordError):
        Event.from_dict(data)
