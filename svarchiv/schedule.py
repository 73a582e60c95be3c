"""
SV-Stunden schedule engine (termine.txt -> session windows).

- Parses EACH termine.txt line into at most ONE SVStunde
- Answers "what's next / how long until" queries

Important rules:
- Bad lines never abort parsing, they are reported as RejectedLine
- "now" is always passed in by the caller, nothing here reads the clock
- Years are inferred: a month earlier than the current month means next year.
  A schedule spanning more than one year boundary is not supported.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from typing import List, Optional, Sequence, Union

from svarchiv.config import FS_TIME_MAP
from svarchiv.model import ParseResult, RejectedLine, SVStunde

logger = logging.getLogger(__name__)


# Examples: "- Mo 19.01 3.FS", "- Di 27.01 6.FS", "- Do 05.02 3. FS"
TERMIN_LINE_RE = re.compile(r"^-\s*\w+\s+(\d{1,2})\.(\d{1,2})\s+(\w+?)\.?\s*FS", re.IGNORECASE)

WEEKDAYS = ["Sonntag", "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag"]


# ---------------------------------------------------------------------------
# Parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def _infer_year(month: int, current_year: int, current_month: int) -> int:
    # If the month has passed this year, assume next year
    if month < current_month:
        return current_year + 1
    return current_year


def parse_termine_line(
    line: str,
    current_year: int,
    current_month: int,
    line_no: int = 0,
) -> Union[SVStunde, RejectedLine]:
    """
    Parses exactly one termine.txt line.

    Returns an SVStunde on success, otherwise a RejectedLine with the reason.
    Never raises.
    """
    raw = line.strip()

    match = TERMIN_LINE_RE.match(raw)
    if not match:
        logger.debug("Skipping line %d, unrecognized format: %r", line_no, raw)
        return RejectedLine(line_no, raw, "unrecognized line format")

    day_str, month_str, code = match.groups()
    day = int(day_str)
    month = int(month_str)
    code = code.upper()

    time_range = FS_TIME_MAP.get(code)
    if time_range is None:
        logger.warning("Unknown FS number %r in line %d: %r", code, line_no, raw)
        return RejectedLine(line_no, raw, f"unknown FS code {code!r}")

    year = _infer_year(month, current_year, current_month)

    try:
        start = datetime(year, month, day, time_range.start.hour, time_range.start.minute)
        end = datetime(year, month, day, time_range.end.hour, time_range.end.minute)
    except ValueError:
        logger.warning("Invalid date %s.%s in line %d: %r", day_str, month_str, line_no, raw)
        return RejectedLine(line_no, raw, f"invalid date {day_str}.{month_str}")

    return SVStunde(
        start=start,
        end=end,
        date_label=f"{day:02d}.{month:02d}",
        fs=f"{code}.FS",
        raw_line=raw,
        line_no=line_no,
    )


def parse_termine(content: str, now: datetime) -> ParseResult:
    """
    Parses the whole termine.txt content.

    Accepted sessions are sorted by start; equal starts keep file order.
    Blank lines are ignored and not reported as rejected.
    """
    result = ParseResult()

    # Only "\n" separates lines, a trailing "\r" (CRLF files) is dropped
    for line_no, line in enumerate(content.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue

        parsed = parse_termine_line(line, now.year, now.month, line_no=line_no)
        if isinstance(parsed, RejectedLine):
            result.rejected.append(parsed)
        else:
            result.stunden.append(parsed)

    result.stunden.sort(key=lambda s: (s.start, s.line_no))

    if result.rejected:
        logger.info("Parsed %d SV-Stunden, skipped %d lines", len(result.stunden), len(result.rejected))

    return result


def parse_termine_file(content: str, now: datetime) -> List[SVStunde]:
    """
    Parses termine.txt content and returns the sessions sorted by start.
    """
    return parse_termine(content, now).stunden


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def is_session_in_progress(stunde: SVStunde, now: datetime) -> bool:
    return stunde.start <= now < stunde.end


def get_next_sv_stunde(stunden: Sequence[SVStunde], now: datetime) -> Optional[SVStunde]:
    """
    Find the next SV-Stunde from now (or the current one if in progress).

    Expects stunden sorted by start, as returned by parse_termine.
    """
    for stunde in stunden:
        if stunde.end > now:
            return stunde
    return None


def get_seconds_until_next(stunde: Optional[SVStunde], now: datetime) -> int:
    """
    Seconds until the session starts, or until it ends while in progress.

    Never negative. Returns 0 when there is no session.
    """
    if stunde is None:
        return 0

    target = stunde.end if is_session_in_progress(stunde, now) else stunde.start
    diff = (target - now).total_seconds()
    return max(0, math.floor(diff))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_sv_stunde_display(stunde: SVStunde) -> str:
    """
    Format for display: "Montag, 19.01.2026 um 11:55 Uhr (3.FS)"
    """
    # Python: Monday == 0, table: Sunday == 0
    weekday = WEEKDAYS[(stunde.start.weekday() + 1) % 7]
    return f"{weekday}, {stunde.start:%d.%m.%Y} um {stunde.start:%H:%M} Uhr ({stunde.fs})"


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def format_duration(seconds: int) -> str:
    """
    Format a number of seconds as German text, largest unit first.

    90 -> "1 Minute und 30 Sekunden", 90000 -> "1 Tag und 1 Stunde"
    """
    if seconds < 60:
        return _plural(seconds, "Sekunde", "Sekunden")

    if seconds < 3600:
        minutes, secs = divmod(seconds, 60)
        return f"{_plural(minutes, 'Minute', 'Minuten')} und {_plural(secs, 'Sekunde', 'Sekunden')}"

    if seconds < 86400:
        hours, rest = divmod(seconds, 3600)
        return f"{_plural(hours, 'Stunde', 'Stunden')} und {_plural(rest // 60, 'Minute', 'Minuten')}"

    days, rest = divmod(seconds, 86400)
    return f"{_plural(days, 'Tag', 'Tage')} und {_plural(rest // 3600, 'Stunde', 'Stunden')}"
