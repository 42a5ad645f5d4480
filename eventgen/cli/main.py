#!/usr/bin/env python3
"""
eventgen - emit a JSON event per second.

Main entrypoint for the eventgen command-line tool.

    eventgen ping
    {"eventId":1,"message":"ping 1"}      (stdout)
    WROTE 1                               (stderr)
"""

import os
import signal
import sys
from typing import Dict, Optional

import typer

from eventgen.core.errors import StreamWriteError
from eventgen.emitter import Emitter
from eventgen.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="eventgen",
    help="Emit a newline-delimited JSON event to stdout once per second",
    add_completion=False,
)


def _install_signal_handlers(emitter: Emitter, received: Dict[str, int]) -> Dict[int, object]:
    """Route SIGINT/SIGTERM to emitter.stop(); returns the previous handlers."""

    def _handler(signum, frame):
        received["signum"] = signum
        emitter.stop()

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.getsignal(signum)
        signal.signal(signum, _handler)
    return previous


def _restore_signal_handlers(previous: Dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def _discard_stdout() -> None:
    """Point stdout at /dev/null so shutdown does not flush into a closed pipe."""
    try:
        fd = sys.stdout.fileno()
    except (OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


@app.command(context_settings={"ignore_unknown_options": True, "allow_extra_args": True})
def emit(
    ctx: typer.Context,
    label: Optional[str] = typer.Argument(
        None,
        help="Prefix for each event message; missing means empty",
        show_default=False,
    ),
):
    """
    Write {"eventId": n, "message": "<label> n"} to stdout every second,
    with "WROTE n" on stderr, until interrupted.

    Examples:
        eventgen ping
        eventgen
    """
    logger = get_logger(__name__, label=label)
    if ctx.args:
        logger.debug("ignoring extra arguments: %s", ctx.args)

    emitter = Emitter(label)
    received: Dict[str, int] = {}
    previous = _install_signal_handlers(emitter, received)
    try:
        emitter.run()
    except StreamWriteError as e:
        logger.error("stopping: %s", e)
        if isinstance(e.cause, BrokenPipeError):
            _discard_stdout()
        raise typer.Exit(1)
    finally:
        _restore_signal_handlers(previous)

    signum = received.get("signum")
    logger.info("emitter stopped by signal %s after %d events", signum, emitter.next_id - 1)
    if signum == signal.SIGINT:
        raise typer.Exit(128 + signal.SIGINT)
    raise typer.Exit(0)


def main():
    """Main entrypoint."""
    setup_logging()
    app()


if __name__ == "__main__":
    main()
