"""
Scan newline-delimited JSON event streams and check their invariants.

Used to verify an emitter's output after the fact: the eventId sequence,
the message format for a label, duplicate row identities and the
WROTE diagnostics that accompany each event.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .core.canonical import decode_line
from .core.errors import MalformedRecordError, SequenceError
from .core.events import Event

logger = logging.getLogger(__name__)

_WROTE_RE = re.compile(r"^WROTE (\d+)$")


class RecordIdentity(ABC):
    """Strategy deriving a row identity from a decoded record."""

    @abstractmethod
    def identity(self, record: Dict[str, Any]) -> str:
        pass


class EmptyIdentity(RecordIdentity):
    """No identity; records are never deduplicated."""

    def identity(self, record: Dict[str, Any]) -> str:
        return ""


class AttributeIdentity(RecordIdentity):
    """Identity taken from one attribute of the record."""

    def __init__(self, name: str) -> None:
        self.name = name

    def identity(self, record: Dict[str, Any]) -> str:
        if self.name not in record:
            raise MalformedRecordError(f"no value for identity attribute {self.name} in record")
        return str(record[self.name])


def scan_records(
    lines: Iterable[Union[str, bytes]],
    strict: bool = False,
    malformed: Optional[List[Tuple[int, str]]] = None,
) -> Iterator[Event]:
    """
    Yield events from NDJSON lines.

    Args:
        lines: Iterable of lines (str or bytes, newline optional)
        strict: Raise on the first malformed line instead of skipping it
        malformed: Optional list collecting (line_no, error) for skipped lines

    Raises:
        MalformedRecordError: On a malformed line when strict=True
    """
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield decode_line(line)
        except MalformedRecordError as e:
            if strict:
                raise MalformedRecordError(f"line {line_no}: {e}") from e
            logger.warning("skipping malformed line %d: %s", line_no, e)
            if malformed is not None:
                malformed.append((line_no, str(e)))


@dataclass
class CheckReport:
    """Outcome of check_events() / check_diagnostics()."""

    count: int = 0
    first_id: Optional[int] = None
    last_id: Optional[int] = None
    sequence_errors: List[Dict[str, Any]] = field(default_factory=list)
    message_errors: List[Dict[str, Any]] = field(default_factory=list)
    duplicate_ids: List[str] = field(default_factory=list)
    malformed: List[Tuple[int, str]] = field(default_factory=list)
    diagnostic_errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (
            self.sequence_errors
            or self.message_errors
            or self.duplicate_ids
            or self.malformed
            or self.diagnostic_errors
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "count": self.count,
            "first_id": self.first_id,
            "last_id": self.last_id,
            "sequence_errors": self.sequence_errors,
            "message_errors": self.message_errors,
            "duplicate_ids": self.duplicate_ids,
            "malformed": [{"line": n, "error": err} for n, err in self.malformed],
            "diagnostic_errors": self.diagnostic_errors,
        }

    def raise_for_errors(self) -> None:
        """
        Raises:
            SequenceError: If any check failed
        """
        if not self.ok:
            raise SequenceError(
                f"stream check failed: {len(self.sequence_errors)} sequence, "
                f"{len(self.message_errors)} message, {len(self.duplicate_ids)} duplicate, "
                f"{len(self.malformed)} malformed, {len(self.diagnostic_errors)} diagnostic errors"
            )


def check_events(
    events: Iterable[Event],
    label: Optional[str] = None,
    identity: Optional[RecordIdentity] = None,
    report: Optional[CheckReport] = None,
) -> CheckReport:
    """
    Check an event sequence.

    - eventIds must be exactly 1, 2, 3, ... (gaps and repeats are reported)
    - when label is given, message must equal "<label> <eventId>"
    - when identity is given, non-empty identities must be unique
    """
    report = report if report is not None else CheckReport()
    identity = identity if identity is not None else EmptyIdentity()
    expected = 1
    seen: Dict[str, int] = {}

    for index, event in enumerate(events):
        report.count += 1
        if report.first_id is None:
            report.first_id = event.event_id
        report.last_id = event.event_id

        if event.event_id != expected:
            kind = "gap" if event.event_id > expected else "repeat"
            report.sequence_errors.append(
                {"index": index, "kind": kind, "expected": expected, "actual": event.event_id}
            )
        expected = max(expected, event.event_id + 1)

        if label is not None:
            want = Event.build(label, event.event_id).message
            if event.message != want:
                report.message_errors.append(
                    {"index": index, "expected": want, "actual": event.message}
                )

        key = identity.identity(event.to_dict())
        if key:
            seen[key] = seen.get(key, 0) + 1
            if seen[key] == 2:
                report.duplicate_ids.append(key)

    return report


def check_diagnostics(
    lines: Iterable[str],
    expected_count: int,
    report: Optional[CheckReport] = None,
) -> CheckReport:
    """
    Check the diagnostic stream: exactly "WROTE 1" .. "WROTE n", in order.
    """
    report = report if report is not None else CheckReport()
    expected = 1
    for line_no, line in enumerate(lines, start=1):
        text = line.rstrip("\r\n")
        if not text.strip():
            continue
        match = _WROTE_RE.match(text)
        if match is None:
            report.diagnostic_errors.append(f"line {line_no}: unexpected diagnostic {text!r}")
            continue
        n = int(match.group(1))
        if n != expected:
            report.diagnostic_errors.append(f"line {line_no}: expected WROTE {expected}, got WROTE {n}")
        expected = max(expected, n + 1)

    written = expected - 1
    if written != expected_count:
        report.diagnostic_errors.append(
            f"diagnostics cover {written} events, event stream has {expected_count}"
        )
    return report
