"""
To-do list helpers.

Tasks themselves live in a remote document database that is not part of
this package. This module only holds the date arithmetic and state changes
the list needs, as plain functions over Task objects:

- next due date for a repetition interval
- days until due and the German due/label texts
- progress updates (three boxes, completed at 3) and cycle reset
"""

from __future__ import annotations

import calendar
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from svarchiv.model import Task

MAX_PROGRESS = 3

REPETITION_LABELS = {
    "none": "Keine Wiederholung",
    "daily": "Täglich",
    "every-2-days": "Alle 2 Tage",
    "every-3-days": "Alle 3 Tage",
    "weekly": "Wöchentlich",
    "monthly": "Monatlich",
}

_INTERVAL_DAYS = {
    "daily": 1,
    "every-2-days": 2,
    "every-3-days": 3,
    "weekly": 7,
}


def _check_interval(interval: str) -> None:
    if interval not in REPETITION_LABELS:
        raise ValueError(f"Unknown repetition interval: {interval!r}")


def _add_month(d: date) -> date:
    year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
    # 31.01 -> 28.02/29.02
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def calculate_next_due_date(current: date, interval: str) -> Optional[date]:
    """
    Next due date for a repeating task, None for interval "none".
    """
    _check_interval(interval)
    if interval == "none":
        return None
    if interval == "monthly":
        return _add_month(current)
    return current + timedelta(days=_INTERVAL_DAYS[interval])


def calculate_days_until_due(due: date, today: date) -> int:
    return (due - today).days


def get_repetition_label(interval: str) -> str:
    _check_interval(interval)
    return REPETITION_LABELS[interval]


def get_due_date_text(due: date, today: date) -> str:
    days = calculate_days_until_due(due, today)

    if days < 0:
        overdue = abs(days)
        return f"Überfällig seit {overdue} Tag{'' if overdue == 1 else 'en'}"
    if days == 0:
        return "Heute fällig"
    if days == 1:
        return "Morgen fällig"
    return f"Fällig in {days} Tagen"


def build_task(
    title: str,
    due_date: date,
    interval: str,
    now: datetime,
    task_id: Optional[str] = None,
) -> Task:
    """
    Create a fresh task (no progress yet) ready to be stored.
    """
    title = title.strip()
    if not title:
        raise ValueError("Task title is required")

    return Task(
        id=task_id or f"task-{uuid.uuid4()}",
        title=title,
        due_date=due_date,
        repetition_interval=interval,
        progress=0,
        completed=False,
        created_at=now,
        next_due_date=calculate_next_due_date(due_date, interval),
    )


def update_progress(task: Task, progress: int) -> Task:
    if not 0 <= progress <= MAX_PROGRESS:
        raise ValueError(f"Progress must be between 0 and {MAX_PROGRESS}, got {progress}")

    completed = progress == MAX_PROGRESS
    next_due = task.next_due_date
    if completed and task.repetition_interval != "none":
        next_due = calculate_next_due_date(task.due_date, task.repetition_interval)

    return replace(task, progress=progress, completed=completed, next_due_date=next_due)


def reset_for_next_cycle(task: Task) -> Task:
    """
    Start the next cycle of a repeating task: the stored next due date
    becomes the due date and progress starts over.
    """
    if task.repetition_interval == "none" or task.next_due_date is None:
        raise ValueError("Task has no repetition interval")

    new_due = task.next_due_date
    return replace(
        task,
        progress=0,
        completed=False,
        due_date=new_due,
        next_due_date=calculate_next_due_date(new_due, task.repetition_interval),
    )


def sort_by_due_date(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: t.due_date)
