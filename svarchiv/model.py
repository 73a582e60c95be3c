"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects shared by the
schedule engine, the protocol archive, topic submission and the task helpers,
so that all modules use the same field names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional


@dataclass(frozen=True)
class FSTimeRange:
    """
    Clock times of one Fachstunde (school period).
    """

    start: time
    end: time


@dataclass(frozen=True)
class SVStunde:
    """
    Represents one scheduled SV-Stunde (student council session).

    Each SVStunde corresponds to exactly one line in termine.txt.
    start/end are naive wall-clock datetimes, no timezone conversion.
    """

    start: datetime
    end: datetime
    date_label: str
    fs: str
    raw_line: str
    line_no: int = 0


@dataclass(frozen=True)
class RejectedLine:
    """
    One termine.txt line that did not produce an SVStunde.
    """

    line_no: int
    line: str
    reason: str


@dataclass
class ParseResult:
    stunden: List[SVStunde] = field(default_factory=list)
    rejected: List[RejectedLine] = field(default_factory=list)


@dataclass
class ProtocolMetadata:
    """
    Represents one archived protocol as listed in index.json.
    """

    slug: str
    title: str
    date: str
    project: str = ""
    tags: List[str] = field(default_factory=list)
    version: int = 1
    visibility: str = "public"
    file: Optional[str] = None


@dataclass
class Protocol(ProtocolMetadata):
    content: str = ""
    html_content: str = ""


@dataclass(frozen=True)
class TopicSubmission:
    name: str
    thema: str
    date_label: str
    fs: str
    stunde_start: Optional[str] = None


@dataclass
class Task:
    """
    Represents one entry of the SV to-do list.

    progress counts the completed boxes (0..3); a task is completed at 3.
    """

    id: str
    title: str
    due_date: date
    repetition_interval: str
    progress: int
    completed: bool
    created_at: datetime
    next_due_date: Optional[date] = None
