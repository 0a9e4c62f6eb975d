"""Parsing of a club results page into fixture import candidates (BeautifulSoup).

Source layout (nuLiga style "Spielplan" results table), one fixture per row:

    0: weekday | 1: date + time | 2: round/number | 3: venue | 4: home team | 5: guest team | ...

Columns 0 and 2 are ignored. The club's own team is rendered as plain text while
opponents link to their club pages, which is how home/away is inferred.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import List, Optional

from bs4 import BeautifulSoup

from config import settings
from domain.models import ImportCandidate
from parsing import tie_dates
from parsing.errors import (
    ColumnMismatchError,
    RowSkipped,
    TableNotFound,
    ValueExtractionError,
)
from utils import html_utils

_log = logging.getLogger(__name__)

DATE_TIME_COL = 1
LOCATION_COL = 3
HOME_COL = 4
GUEST_COL = 5
MIN_CELLS = GUEST_COL + 1


@dataclass(frozen=True, slots=True)
class SideClassification:
    is_home: bool
    opponent: str
    ambiguous: bool = False


def locate_results_table(
    soup: BeautifulSoup,
    *,
    table_class: str = settings.RESULTS_TABLE_CLASS,
    index: int = settings.RESULTS_TABLE_INDEX,
):
    """Return the ``index``-th table carrying ``table_class``.

    The page repeats the class on an unrelated standings table first, hence the
    positional pick.
    """
    tables = soup.find_all("table", class_=table_class)
    if len(tables) <= index:
        raise TableNotFound(
            "Results table not found",
            context={"table_class": table_class, "index": index, "found": len(tables)},
        )
    return tables[index]


def data_rows(table) -> list:
    """Rows inside ``<tbody>`` sections, else every row but the header row."""
    rows = [
        tr
        for body in table.find_all("tbody", recursive=False)
        for tr in body.find_all("tr", recursive=False)
    ]
    if rows:
        return rows
    return table.find_all("tr")[1:]


def row_cells(tr) -> list:
    return tr.find_all(["td", "th"], recursive=False)


def classify_sides(home_cell, guest_cell) -> SideClassification:
    """Decide whether the club is home and which side names the opponent.

    A linked home cell means the home team is the opponent. With neither or
    both sides linked the club is assumed home and the row is flagged.
    """
    home_linked = html_utils.has_link(home_cell)
    guest_linked = html_utils.has_link(guest_cell)
    if home_linked and not guest_linked:
        return SideClassification(is_home=False, opponent=html_utils.cell_text(home_cell))
    return SideClassification(
        is_home=True,
        opponent=html_utils.cell_text(guest_cell),
        ambiguous=home_linked == guest_linked,
    )


def build_candidate(cells: list, row_index: int, tz: tzinfo | str | None = None) -> ImportCandidate:
    """Turn one table row into a candidate; raises ``RowSkipped`` subclasses."""
    if len(cells) < MIN_CELLS:
        raise ColumnMismatchError(
            "Row has too few cells",
            context={"row": row_index, "cells": len(cells), "expected": MIN_CELLS},
        )
    raw_date = html_utils.cell_text(cells[DATE_TIME_COL])
    iso = tie_dates.normalize_tie_datetime(raw_date, tz)
    if not iso:
        raise ValueExtractionError(
            "Unparsable date/time", context={"row": row_index, "text": raw_date}
        )
    sides = classify_sides(cells[HOME_COL], cells[GUEST_COL])
    return ImportCandidate(
        id=row_index,
        opponent_name=sides.opponent,
        raw_date_text=raw_date,
        iso_timestamp=iso,
        location=html_utils.cell_text(cells[LOCATION_COL]),
        is_home=sides.is_home,
        needs_review=sides.ambiguous,
    )


def extract_candidates(
    html: str,
    *,
    tz: tzinfo | str | None = None,
    table_class: str = settings.RESULTS_TABLE_CLASS,
    table_index: int = settings.RESULTS_TABLE_INDEX,
    skipped: Optional[List[RowSkipped]] = None,
) -> List[ImportCandidate]:
    """Parse ``html`` into candidates in page order.

    Raises ``TableNotFound`` when the results table is missing. Malformed rows
    are logged and left out; pass a list as ``skipped`` to collect them.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = locate_results_table(soup, table_class=table_class, index=table_index)
    candidates: List[ImportCandidate] = []
    for idx, tr in enumerate(data_rows(table)):
        try:
            candidates.append(build_candidate(row_cells(tr), idx, tz))
        except RowSkipped as e:
            _log.info("Skipping row %d: %s %s", idx, e, e.context)
            if skipped is not None:
                skipped.append(e)
    return candidates
