"""
Configuration.

Central place for environment driven settings (data file locations,
Google Docs credentials, logging level) and for the static FS time table.

Environment variables are read from the process environment and from a
local .env file (loaded once on import).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

from svarchiv.model import FSTimeRange

load_dotenv()


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# PACKAGE_DIR always points to the folder where this file is located
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = PACKAGE_DIR / "data"

DOCS_API_URL = "https://docs.googleapis.com/v1/documents"


# ---------------------------------------------------------------------------
# FS (Fachstunde) -> clock time
# ---------------------------------------------------------------------------

FS_TIME_MAP: Mapping[str, FSTimeRange] = MappingProxyType(
    {
        "HU": FSTimeRange(time(8, 0), time(9, 40)),
        "1": FSTimeRange(time(10, 0), time(10, 45)),
        "2": FSTimeRange(time(10, 50), time(11, 35)),
        "3": FSTimeRange(time(11, 55), time(12, 40)),
        "4": FSTimeRange(time(12, 45), time(13, 30)),
        "5": FSTimeRange(time(13, 30), time(14, 15)),
        "6": FSTimeRange(time(14, 15), time(15, 0)),
        "7": FSTimeRange(time(15, 0), time(15, 45)),
        "8": FSTimeRange(time(15, 45), time(16, 30)),
    }
)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name, "").strip()
    return Path(value) if value else default


def _env_optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name, "").strip()
    return Path(value) if value else None


def _data_dir() -> Path:
    return _env_path("SVARCHIV_DATA_DIR", DEFAULT_DATA_DIR)


@dataclass
class Settings:
    data_dir: Path = field(default_factory=_data_dir)
    termine_file: Optional[Path] = None
    index_file: Optional[Path] = None
    themen_doc_id: Optional[str] = field(default_factory=lambda: os.getenv("THEMEN_DOC_ID") or None)
    google_service_account_json: Optional[str] = field(
        default_factory=lambda: os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON") or None
    )
    google_service_account_file: Optional[Path] = field(default_factory=lambda: _env_optional_path("GOOGLE_SERVICE_ACCOUNT_FILE"))
    docs_api_url: str = field(default_factory=lambda: os.getenv("GOOGLE_DOCS_API_URL", DOCS_API_URL))
    timezone: str = field(default_factory=lambda: os.getenv("SVARCHIV_TIMEZONE", "Europe/Berlin"))
    log_level: str = field(default_factory=lambda: os.getenv("SVARCHIV_LOG_LEVEL", "INFO"))

    def __post_init__(self) -> None:
        # File locations follow data_dir unless given explicitly
        if self.termine_file is None:
            self.termine_file = _env_path("SVARCHIV_TERMINE_FILE", self.data_dir / "termine.txt")
        if self.index_file is None:
            self.index_file = _env_path("SVARCHIV_INDEX_FILE", self.data_dir / "index.json")

    def service_account_configured(self) -> bool:
        return bool(self.google_service_account_json or self.google_service_account_file)

    def topics_configured(self) -> bool:
        return bool(self.themen_doc_id) and self.service_account_configured()


def get_settings() -> Settings:
    """
    Build a fresh Settings object from the current environment.

    A function instead of a module constant so tests can change the
    environment and get matching settings.
    """
    return Settings()
