"""
CLI (Command Line Interface).

This module provides terminal commands for the SV team and for testing, e.g.:

    svarchiv list
    svarchiv next
    svarchiv countdown
    svarchiv protocols --search protokoll
    svarchiv protocol <slug>
    svarchiv submit-topic --name <name> --thema <text>
    svarchiv due 2026-10-20 --repeat weekly

Note:
- Data files are read via svarchiv.storage and never crash a command
- Output uses rich (tables, live countdown)
"""

from __future__ import annotations

import argparse
import time
from datetime import date, datetime
from pathlib import Path

from rich.console import Console
from rich.live import Live
from rich.table import Table

from svarchiv.config import get_settings
from svarchiv.logging_config import setup_logging
from svarchiv.model import SVStunde
from svarchiv.protocols import filter_protocols, get_all_protocols, get_protocol_by_slug
from svarchiv.schedule import (
    format_duration,
    format_sv_stunde_display,
    get_next_sv_stunde,
    get_seconds_until_next,
    is_session_in_progress,
)
from svarchiv.storage import load_termine
from svarchiv.tasks import REPETITION_LABELS, calculate_next_due_date, get_due_date_text, get_repetition_label
from svarchiv.topics import (
    TopicServiceUnavailable,
    TopicSubmissionError,
    TopicValidationError,
    submission_payload,
    submit_topic,
)

console = Console()


def _cmd_list(args: argparse.Namespace) -> int:
    """
    Print all parsed SV-Stunden as a table.
    """
    now = datetime.now()
    result = load_termine(args.termine, now=now)

    if not result.stunden:
        console.print("Keine SV-Stunden gefunden.")
    else:
        table = Table(title="SV-Stunden")
        table.add_column("Datum")
        table.add_column("FS")
        table.add_column("Beginn")
        table.add_column("Ende")
        table.add_column("Status")

        for s in result.stunden:
            if is_session_in_progress(s, now):
                status = "läuft"
            elif s.end <= now:
                status = "vorbei"
            else:
                status = "geplant"
            table.add_row(s.date_label, s.fs, f"{s.start:%d.%m.%Y %H:%M}", f"{s.end:%H:%M}", status)

        console.print(table)

    if args.show_rejected and result.rejected:
        console.print(f"Skipped lines: {len(result.rejected)}")
        for r in result.rejected:
            console.print(f"- line {r.line_no}: {r.reason} | {r.line}", markup=False)

    return 0


def _cmd_next(args: argparse.Namespace) -> int:
    """
    Print the next SV-Stunde and how long until it starts (or ends).
    """
    now = datetime.now()
    nxt = get_next_sv_stunde(load_termine(args.termine, now=now).stunden, now)

    if nxt is None:
        console.print("Keine kommende SV-Stunde.")
        return 0

    seconds = get_seconds_until_next(nxt, now)
    console.print(f"Nächste SV-Stunde: {format_sv_stunde_display(nxt)}")
    if is_session_in_progress(nxt, now):
        console.print(f"Sitzung läuft, endet in {format_duration(seconds)}")
    else:
        console.print(f"Beginnt in {format_duration(seconds)}")
    return 0


def _countdown_panel(nxt: SVStunde, now: datetime) -> Table:
    seconds = get_seconds_until_next(nxt, now)
    count = f"{seconds:,}".replace(",", ".")
    heading = "Sitzung läuft" if is_session_in_progress(nxt, now) else "Nächste SV-Stunde"

    grid = Table.grid(padding=(0, 1))
    grid.add_row(f"[bold cyan]{heading}[/]")
    grid.add_row(f"[bold]{count} Sekunden[/]")
    grid.add_row(f"({format_duration(seconds)})")
    grid.add_row(f"{nxt.date_label} • {nxt.fs}")
    return grid


def _cmd_countdown(args: argparse.Namespace) -> int:
    """
    Live countdown, refreshed every second.

    Counts down to the start, then on to the end while the session runs.
    """
    now = datetime.now()
    nxt = get_next_sv_stunde(load_termine(args.termine, now=now).stunden, now)

    if nxt is None:
        console.print("Keine kommende SV-Stunde.")
        return 0

    try:
        with Live(_countdown_panel(nxt, now), console=console, refresh_per_second=4) as live:
            while True:
                time.sleep(1)
                now = datetime.now()
                if now >= nxt.end:
                    break
                live.update(_countdown_panel(nxt, now))
    except KeyboardInterrupt:
        return 0

    return 0


def _cmd_protocols(args: argparse.Namespace) -> int:
    protocols = filter_protocols(
        get_all_protocols(args.index),
        query=args.search or "",
        project=args.project or "",
        tag=args.tag or "",
    )

    n = len(protocols)
    console.print(f"{n} {'Dokument' if n == 1 else 'Dokumente'} gefunden")
    for p in protocols:
        console.print(f"{p.date or '----------'} | {p.title} | {p.slug}", markup=False)
    return 0


def _cmd_protocol(args: argparse.Namespace) -> int:
    protocol = get_protocol_by_slug(args.slug, args.index)
    if protocol is None:
        console.print(f"Protocol not found: {args.slug}", markup=False)
        return 1

    console.print(f"Titel: {protocol.title}", markup=False)
    console.print(f"Datum: {protocol.date}")
    console.print(f"Datei: {protocol.file or '-'}", markup=False)
    return 0


def _cmd_submit_topic(args: argparse.Namespace) -> int:
    """
    Submit a topic for the next SV-Stunde to the topics document.
    """
    now = datetime.now()
    nxt = get_next_sv_stunde(load_termine(args.termine, now=now).stunden, now)
    if nxt is None:
        console.print("Keine kommende SV-Stunde, Thema kann nicht eingereicht werden.")
        return 1

    try:
        submission = submit_topic(submission_payload(args.name, args.thema, nxt))
    except TopicValidationError as exc:
        console.print(str(exc))
        return 1
    except TopicServiceUnavailable as exc:
        console.print(str(exc))
        return 3
    except TopicSubmissionError as exc:
        console.print(str(exc))
        return 2

    console.print(f"Thema erfolgreich eingereicht ({submission.date_label}, {submission.fs})")
    return 0


def _cmd_due(args: argparse.Namespace) -> int:
    try:
        due = date.fromisoformat(args.due_date)
    except ValueError:
        console.print(f"Invalid date (expected YYYY-MM-DD): {args.due_date}", markup=False)
        return 1

    console.print(get_due_date_text(due, date.today()))
    console.print(get_repetition_label(args.repeat))
    next_due = calculate_next_due_date(due, args.repeat)
    if next_due is not None:
        console.print(f"Nächste Fälligkeit: {next_due:%d.%m.%Y}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="svarchiv", description="SV-Archiv CLI")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: SVARCHIV_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List all SV-Stunden")
    p_list.add_argument("--termine", type=Path, default=None, help="Path to termine.txt")
    p_list.add_argument("--show-rejected", action="store_true", help="Also show skipped lines")

    p_next = sub.add_parser("next", help="Show the next SV-Stunde")
    p_next.add_argument("--termine", type=Path, default=None, help="Path to termine.txt")

    p_countdown = sub.add_parser("countdown", help="Live countdown to the next SV-Stunde")
    p_countdown.add_argument("--termine", type=Path, default=None, help="Path to termine.txt")

    p_protocols = sub.add_parser("protocols", help="List archived protocols")
    p_protocols.add_argument("--index", type=Path, default=None, help="Path to index.json")
    p_protocols.add_argument("--search", type=str, default="", help="Search text (title)")
    p_protocols.add_argument("--project", type=str, default="", help="Filter by project")
    p_protocols.add_argument("--tag", type=str, default="", help="Filter by tag")

    p_protocol = sub.add_parser("protocol", help="Show one protocol")
    p_protocol.add_argument("slug", type=str, help="Protocol slug (e.g. sv-protokoll-2025-11-25)")
    p_protocol.add_argument("--index", type=Path, default=None, help="Path to index.json")

    p_submit = sub.add_parser("submit-topic", help="Submit a topic for the next SV-Stunde")
    p_submit.add_argument("--name", type=str, required=True, help="Your name")
    p_submit.add_argument("--thema", type=str, required=True, help="Topic text")
    p_submit.add_argument("--termine", type=Path, default=None, help="Path to termine.txt")

    p_due = sub.add_parser("due", help="Show due text for a task date")
    p_due.add_argument("due_date", type=str, help="Due date (YYYY-MM-DD)")
    p_due.add_argument("--repeat", choices=sorted(REPETITION_LABELS), default="none", help="Repetition interval")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or get_settings().log_level)

    if args.command == "list":
        raise SystemExit(_cmd_list(args))
    if args.command == "next":
        raise SystemExit(_cmd_next(args))
    if args.command == "countdown":
        raise SystemExit(_cmd_countdown(args))
    if args.command == "protocols":
        raise SystemExit(_cmd_protocols(args))
    if args.command == "protocol":
        raise SystemExit(_cmd_protocol(args))
    if args.command == "submit-topic":
        raise SystemExit(_cmd_submit_topic(args))
    if args.command == "due":
        raise SystemExit(_cmd_due(args))

    raise SystemExit(2)
