"""Normalization of localized fixture date/time cells into ISO-8601 strings.

Three tiers, tried in order (later tiers lose timezone information):

  1. ``D.M.YYYY H:MM`` / ``DD.MM.YY HH:MM`` -> wall-clock time in the source
     timezone with its UTC offset at that instant, e.g. ``2025-11-22T10:00:00+01:00``.
  2. ``D.M.YYYY`` alone -> naive midnight, e.g. ``2025-11-22T00:00:00``.
  3. Anything ``dateutil`` can read as a full date -> UTC ISO string. Text
     without year, month and day (a bare time such as ``10:00``) is rejected.

Returns ``None`` when no tier matches.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil import parser as dtparser

from config import settings
from utils import html_utils

_log = logging.getLogger(__name__)

DATETIME_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{2,4})\s+(\d{1,2}):(\d{2})")
DATE_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")

_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def source_timezone(name: str | None = None) -> tzinfo:
    return ZoneInfo(name or settings.SOURCE_TIMEZONE)


def _expand_year(raw: str) -> int:
    return int(f"20{raw}") if len(raw) == 2 else int(raw)


def _parse_strict(text: str, tz: tzinfo) -> Optional[str]:
    m = DATETIME_RE.search(text)
    if not m:
        return None
    day, month, year_raw, hour, minute = m.groups()
    try:
        # Offset is derived from the local date, so DST transitions are honoured
        local = datetime(
            _expand_year(year_raw), int(month), int(day), int(hour), int(minute), tzinfo=tz
        )
    except ValueError:
        return None
    return local.isoformat(timespec="seconds")


def _parse_date_only(text: str) -> Optional[str]:
    m = DATE_RE.search(text)
    if not m:
        return None
    day, month, year = m.groups()
    try:
        midnight = datetime(int(year), int(month), int(day))
    except ValueError:
        return None
    return midnight.isoformat(timespec="seconds")


def _parse_free_form(text: str) -> Optional[datetime]:
    """``dateutil`` parse that only succeeds when the text carries a full date.

    Missing fields are filled from ``default``; parsing against two defaults
    that differ in every date field exposes text such as ``10:00`` or ``2``.
    """
    try:
        first = dtparser.parse(text, dayfirst=True, default=_DEFAULT_A)
        second = dtparser.parse(text, dayfirst=True, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return first


def _parse_generic(text: str, tz: tzinfo) -> Optional[str]:
    # ISO input first, so dayfirst never swaps day and month of an ISO date
    try:
        parsed = dtparser.isoparse(text)
    except (ValueError, OverflowError):
        parsed = _parse_free_form(text)
        if parsed is None:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.astimezone(timezone.utc).isoformat(timespec="seconds")


def normalize_tie_datetime(text: str | None, tz: tzinfo | str | None = None) -> Optional[str]:
    """Return the ISO timestamp for a date/time cell, or ``None`` if unparsable."""
    cleaned = html_utils.clean_cell(text or "")
    if not cleaned:
        return None
    zone = tz if isinstance(tz, tzinfo) else source_timezone(tz)
    iso = (
        _parse_strict(cleaned, zone)
        or _parse_date_only(cleaned)
        or _parse_generic(cleaned, zone)
    )
    if not iso:
        _log.debug("No date pattern matched %r", cleaned)
    return iso


def is_valid_iso(value: str | None) -> bool:
    """True when ``value`` is a non-empty ISO-8601 timestamp."""
    if not value:
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True
