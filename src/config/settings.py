"""Global configuration and constants for the tie import pipeline."""

from __future__ import annotations

import os
from typing import Final, Optional

DEFAULT_USER_AGENT: Final = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/115.0 Safari/537.36"
)
DEFAULT_ACCEPT: Final = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
DEFAULT_ACCEPT_LANGUAGE: Final = "de-DE,de;q=0.9,en;q=0.5"
# No explicit timeout: the transport's default applies
DEFAULT_TIMEOUT: Final[Optional[float]] = None
ALLOWED_SCHEMES: Final = ("http", "https")

# Times on the results pages are German wall-clock times
SOURCE_TIMEZONE: Final = os.environ.get("TIEPLANNER_SOURCE_TZ", "Europe/Berlin")

# The results page carries two tables with this class; the first one is the standings
RESULTS_TABLE_CLASS: Final = "result-set"
RESULTS_TABLE_INDEX: Final = 1

DATA_DIR: Final = os.environ.get("TIEPLANNER_DATA_DIR", "data")
DB_PATH: Final = os.environ.get("TIEPLANNER_DB", os.path.join(DATA_DIR, "tieplanner.sqlite"))
LOG_LEVEL: Final = os.environ.get("TIEPLANNER_LOG_LEVEL", "INFO")
