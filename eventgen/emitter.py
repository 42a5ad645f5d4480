"""
Emitter: writes one JSON event per cycle to the event stream.

Each cycle:
1. build Event(i) with message "<label> <i>"
2. write the JSON line to the event stream and flush
3. write "WROTE <i>" to the diagnostic stream and flush
4. i += 1
5. wait `interval` seconds (cancellable via stop())

Usage:
    emitter = Emitter("ping")
    emitter.run()  # until emitter.stop()
"""

import logging
import os
import select
import sys
from typing import Optional, TextIO, Tuple

from .core.canonical import encode_event
from .core.errors import StreamWriteError
from .core.events import Event

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


class Emitter:
    """
    Long-running event emitter.

    The counter belongs to this instance, starts at 1 and advances by
    exactly one per emitted event. Writes are flushed immediately so a
    downstream reader sees every line as soon as it is written.
    """

    def __init__(
        self,
        label: Optional[str] = None,
        out: Optional[TextIO] = None,
        diag: Optional[TextIO] = None,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self.label = label
        self.out = out if out is not None else sys.stdout
        self.diag = diag if diag is not None else sys.stderr
        self.interval = interval
        self._next_id = 1
        self._stopped = False
        # (read_fd, write_fd) of the wake-up pipe while run() is active
        self._wake_fds: Optional[Tuple[int, int]] = None

    @property
    def next_id(self) -> int:
        """eventId of the next event to be emitted."""
        return self._next_id

    @property
    def stopped(self) -> bool:
        return self._stopped

    def emit_once(self) -> Event:
        """
        Emit a single event: event line first, then the WROTE line.

        Raises:
            StreamWriteError: If either stream is unwritable. The counter
                is not advanced in that case.
        """
        event = Event.build(self.label, self._next_id)
        self._write(self.out, "event stream", encode_event(event) + "\n")
        self._write(self.diag, "diagnostic stream", f"WROTE {event.event_id}\n")
        self._next_id += 1
        logger.debug("emitted event %d", event.event_id)
        return event

    def run(self, limit: Optional[int] = None) -> int:
        """
        Emit events until stop() is called.

        Args:
            limit: Stop after this many events (None = unbounded)

        Returns:
            Number of events emitted by this call
        """
        emitted = 0
        logger.info("emitter started (label=%r, interval=%.3fs)", self.label, self.interval)
        self._open_wake_pipe()
        try:
            while not self._stopped:
                self.emit_once()
                emitted += 1
                if limit is not None and emitted >= limit:
                    break
                if self._pause():
                    break
        finally:
            self._close_wake_pipe()
        logger.info("emitter stopped after %d events", emitted)
        return emitted

    def stop(self) -> None:
        """
        Request the loop to end at the next wait boundary.

        Takes no locks, so it may be called from a signal handler running
        on the same thread as run(), as well as from other threads.
        """
        self._stopped = True
        fds = self._wake_fds
        if fds is None:
            return
        try:
            os.write(fds[1], b"\0")
        except OSError:
            # pipe already holds a wake-up byte, or run() just closed it
            pass

    def _pause(self) -> bool:
        """Wait up to `interval` seconds; True once stop() was requested."""
        if self._stopped:
            return True
        select.select([self._wake_fds[0]], [], [], self.interval)
        return self._stopped

    def _open_wake_pipe(self) -> None:
        read_fd, write_fd = os.pipe()
        os.set_blocking(write_fd, False)
        self._wake_fds = (read_fd, write_fd)

    def _close_wake_pipe(self) -> None:
        fds, self._wake_fds = self._wake_fds, None
        if fds is not None:
            os.close(fds[0])
            os.close(fds[1])

    def _write(self, stream: TextIO, name: str, text: str) -> None:
        try:
            stream.write(text)
            stream.flush()
        except OSError as e:
            raise StreamWriteError(name, e) from e
