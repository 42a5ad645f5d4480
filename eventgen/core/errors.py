"""
Exception types for the event emitter.
"""


class EventgenError(Exception):
    """Base class for eventgen errors."""
    pass


class StreamWriteError(EventgenError):
    """Raised when the event stream or the diagnostic stream cannot be written."""

    def __init__(self, stream: str, cause: OSError) -> None:
        super().__init__(f"failed to write {stream}: {cause}")
        self.stream = stream
        self.cause = cause


class MalformedRecordError(EventgenError):
    """Raised when a scanned line is not a valid event record."""
    pass


class SequenceError(EventgenError):
    """Raised when a scanned stream breaks the counter or diagnostic ordering."""
    pass
