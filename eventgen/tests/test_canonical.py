"""
Tests for the event wire encoding.
"""

import json

import pytest

from eventgen.core.canonical import canonical_json_str, canonicalize, decode_line, encode_event
from eventgen.core.errors import MalformedRecordError
from eventgen.core.events import Event


def test_encode_event_is_compact():
    """Wire form has no whitespace and keeps eventId before message."""
    assert encode_event(Event.build("ping", 3)) == '{"eventId":3,"message":"ping 3"}'


def test_encode_event_single_line():
    """Control characters in a label are escaped, never raw newlines."""
    line = encode_event(Event.build("a\nb", 1))

    assert "\n" not in line
    assert json.loads(line)["message"] == "a\nb 1"


def test_encode_event_keeps_unicode():
    """Non-ASCII labels are written as UTF-8, not \\u escapes."""
    line = encode_event(Event.build("日本語", 1))

    assert line == '{"eventId":1,"message":"日本語 1"}'


def test_encode_large_counter():
    """The counter does not wrap."""
    big = 2 ** 70
    assert json.loads(encode_event(Event.build("x", big)))["eventId"] == big


def test_decode_line_str_and_bytes():
    """Lines decode the same from str and bytes."""
    expected = Event(2, "ping 2")

    assert decode_line('{"eventId":2,"message":"ping 2"}\n') == expected
    assert decode_line(b'{"eventId":2,"message":"ping 2"}\n') == expected


@pytest.mark.parametrize("line", ["not json", "[1, 2]", b"\xff\xfe", '{"eventId":1}'])
def test_decode_line_rejects_malformed(line):
    """Invalid JSON, non-objects, bad UTF-8 and partial records are rejected."""
    with pytest.raises(MalformedRecordError):
        decode_line(line)


def test_canonical_json_str_sorted():
    """Report JSON has sorted keys and no whitespace."""
    obj = {"b": 2, "a": {"z": 1, "y": (1, 2)}}

    assert canonicalize(obj) == {"a": {"y": [1, 2], "z": 1}, "b": 2}
    assert canonical_json_str(obj) == '{"a":{"y":[1,2],"z":1},"b":2}'
