"""
Check command: verify a captured event stream.

Reads NDJSON events (a file or stdin), checks the eventId sequence, the
message format and, optionally, the matching WROTE diagnostics.
"""

import logging
import sys
from typing import List, Optional, TextIO, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from eventgen.core.canonical import canonical_json_str
from eventgen.core.errors import MalformedRecordError, SequenceError
from eventgen.logging_config import setup_logging
from eventgen.scan import (
    AttributeIdentity,
    CheckReport,
    EmptyIdentity,
    check_diagnostics,
    check_events,
    scan_records,
)

app = typer.Typer(
    name="eventgen-check",
    help="Verify a newline-delimited JSON event stream",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def _open_input(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return open(path, "r", encoding="utf-8")


def _print_report(report: CheckReport, source: str) -> None:
    table = Table(title=f"Event stream: {source}")
    table.add_column("Check", style="cyan")
    table.add_column("Result")

    def status(problems: list) -> str:
        return "[green]ok[/green]" if not problems else f"[red]{len(problems)} error(s)[/red]"

    table.add_row("Events", str(report.count))
    table.add_row("First / last eventId", f"{report.first_id} / {report.last_id}")
    table.add_row("Sequence", status(report.sequence_errors))
    table.add_row("Messages", status(report.message_errors))
    table.add_row("Duplicate identities", status(report.duplicate_ids))
    table.add_row("Malformed lines", status(report.malformed))
    table.add_row("Diagnostics", status(report.diagnostic_errors))
    console.print(table)

    for err in report.sequence_errors[:10]:
        console.print(
            f"  [red]{err['kind']}[/red] at #{err['index']}: expected {err['expected']}, got {err['actual']}"
        )
    for err in report.message_errors[:10]:
        console.print(
            f"  [red]message[/red] at #{err['index']}: expected {escape(repr(err['expected']))}, got {escape(repr(err['actual']))}",
            highlight=False,
        )
    for key in report.duplicate_ids[:10]:
        console.print(f"  [red]duplicate[/red] identity {escape(key)}", highlight=False)
    for line_no, err in report.malformed[:10]:
        console.print(f"  [red]malformed[/red] line {line_no}: {escape(err)}", highlight=False)
    for err in report.diagnostic_errors[:10]:
        console.print(f"  [red]diagnostic[/red] {escape(err)}", highlight=False)

    verdict = "[bold green]PASS[/bold green]" if report.ok else "[bold red]FAIL[/bold red]"
    console.print(f"\n[bold]Result:[/bold] {verdict}")


@app.command()
def check(
    input_path: str = typer.Argument("-", help="NDJSON event file ('-' for stdin)"),
    label: Optional[str] = typer.Option(
        None, "--label", "-l", help="Expected label; checks message == '<label> <eventId>'"
    ),
    insert_id: Optional[str] = typer.Option(
        None, "--insert-id", help="Record attribute that uniquely identifies an event"
    ),
    diagnostics: Optional[str] = typer.Option(
        None, "--diagnostics", "-d", help="Captured stderr to check for matching WROTE lines"
    ),
    strict: bool = typer.Option(False, "--strict", help="Fail on the first malformed line"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Verify an event stream captured from eventgen.

    Examples:
        eventgen ping | head -n 5 | eventgen-check --label ping
        eventgen-check events.jsonl --diagnostics wrote.log --json
    """
    identity = AttributeIdentity(insert_id) if insert_id else EmptyIdentity()
    malformed: List[Tuple[int, str]] = []
    report = CheckReport(malformed=malformed)

    try:
        stream = _open_input(input_path)
        try:
            events = scan_records(stream, strict=strict, malformed=malformed)
            check_events(events, label=label, identity=identity, report=report)
        finally:
            if stream is not sys.stdin:
                stream.close()

        if diagnostics is not None:
            with open(diagnostics, "r", encoding="utf-8") as f:
                check_diagnostics(f, expected_count=report.count, report=report)

    except FileNotFoundError as e:
        if json_output:
            print(canonical_json_str({"error": "File not found", "path": e.filename}))
        else:
            console.print(f"[red]Error: File not found:[/red] {e.filename}")
        raise typer.Exit(2)
    except (MalformedRecordError, UnicodeDecodeError, OSError) as e:
        if json_output:
            print(canonical_json_str({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(2)

    if json_output:
        print(canonical_json_str(report.to_dict()))
    else:
        _print_report(report, "stdin" if input_path == "-" else input_path)

    try:
        report.raise_for_errors()
    except SequenceError as e:
        logger.warning("%s", e)
        raise typer.Exit(1)
    raise typer.Exit(0)


def main():
    """Main entrypoint."""
    setup_logging()
    app()


if __name__ == "__main__":
    main()
