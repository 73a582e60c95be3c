"""
Reading the data files that external jobs and editors maintain.

This module manages the files:

    data/termine.txt   (hand-edited list of SV-Stunden)
    data/index.json    (protocol index written by the drive sync job)

Both files are owned by someone else, so reading is deliberately forgiving:
a missing or broken file never crashes the application, it yields an empty
result and a logged warning instead.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from svarchiv.config import get_settings
from svarchiv.model import ParseResult
from svarchiv.schedule import parse_termine

logger = logging.getLogger(__name__)


def _resolve(path: str | Path | None, default: Path) -> Path:
    # Use custom path if provided (mainly for tests and the CLI),
    # otherwise fall back to the configured location
    return Path(path) if path is not None else default


def load_termine_text(path: str | Path | None = None) -> str:
    """
    Return the content of termine.txt, or "" if it cannot be read.
    """
    termine_path = _resolve(path, get_settings().termine_file)

    if not termine_path.exists():
        logger.warning("termine.txt not found: %s", termine_path)
        return ""

    try:
        return termine_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error reading %s: %s", termine_path, exc)
        return ""


def load_termine(path: str | Path | None = None, now: Optional[datetime] = None) -> ParseResult:
    """
    Read and parse termine.txt. Returns an empty ParseResult if the file is missing.
    """
    content = load_termine_text(path)
    return parse_termine(content, now if now is not None else datetime.now())


def load_protocol_index(path: str | Path | None = None) -> List[Dict[str, Any]]:
    """
    Load the drive-synced index.json as a list of entry dicts.

    Returns [] if the file does not exist or is invalid.
    Entries that are not JSON objects are dropped.
    """
    index_path = _resolve(path, get_settings().index_file)

    if not index_path.exists():
        logger.warning("index.json not found, returning empty list: %s", index_path)
        return []

    try:
        data = json.loads(index_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Error reading %s: %s", index_path, exc)
        return []

    if not isinstance(data, list):
        logger.error("Unexpected index.json layout in %s (expected a list)", index_path)
        return []

    return [entry for entry in data if isinstance(entry, dict)]
