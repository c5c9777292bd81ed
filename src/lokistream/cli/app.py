"""
Root Typer application for the lokistream CLI.

``lokistream format`` reads newline-delimited JSON events and prints the
Loki push payload, which can be piped straight into ``curl``::

    lokistream format events.jsonl -l app -l level -g env=prod \\
        | curl -H 'Content-Type: application/json' --data-binary @- \\
          http://localhost:3100/loki/api/v1/push
"""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.markup import escape
from typer import Typer

from lokistream.cli.utils import console, err_console, read_events
from lokistream.core.config import get_settings, parse_label_pairs
from lokistream.core.errors import LokiStreamError, categorize_error
from lokistream.core.logging import LogContext, configure_logging
from lokistream.formatting import LokiBatchFormatter

app = Typer(
    name="lokistream",
    help="lokistream: format structured log batches as Loki push payloads.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from lokistream import __version__

        console.print(f"lokistream {__version__}", highlight=False)
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """lokistream CLI: turn NDJSON log events into Loki push payloads."""


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("format")
def format_events(
    source: Path | None = typer.Argument(None, help="NDJSON event file (default: stdin)"),
    labels: list[str] | None = typer.Option(
        None, "--label", "-l", help="Property promoted to a label (repeatable; 'level' adds severity)"
    ),
    global_labels: list[str] | None = typer.Option(
        None, "--global-label", "-g", help="Static KEY=VALUE label for every stream (repeatable)"
    ),
    preserve_timestamps: bool | None = typer.Option(
        None,
        "--preserve-timestamps/--override-timestamps",
        help="Keep each event's own time on the wire, or stamp the whole batch with now.",
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the payload here (default: stdout)"),
) -> None:
    """Format NDJSON log events into one Loki push payload."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")

    try:
        formatter = LokiBatchFormatter(
            global_labels=parse_label_pairs(global_labels) if global_labels else settings.global_labels,
            label_names=labels or settings.labels,
            preserve_timestamps=(
                settings.preserve_timestamps if preserve_timestamps is None else preserve_timestamps
            ),
            duplicate_label_policy=settings.duplicate_label_policy,
        )

        with LogContext(source=str(source) if source else "stdin"):
            if source is not None:
                with source.open(encoding="utf-8") as fh:
                    events = list(read_events(fh))
            else:
                events = list(read_events(sys.stdin))

            if output is not None:
                # The target is only opened once the payload is complete.
                buffer = io.StringIO()
                formatter.format(events, buffer)
                output.write_text(buffer.getvalue(), encoding="utf-8")
            else:
                formatter.format(events, sys.stdout)
    except LokiStreamError as e:
        _fail(e, e.message, e.context.line)
    except OSError as e:
        _fail(e, str(e))


def _fail(error: Exception, message: str, line: int | None = None) -> NoReturn:
    category = categorize_error(error).value
    location = f" (line {line})" if line else ""
    err_console.print(f"[bold red]{category} error[/bold red]{location}: {escape(message)}")
    raise typer.Exit(code=1) from error
