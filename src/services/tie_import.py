"""Tie import orchestration: fetch a results page, stage fixtures, commit selections.

Flow:
  fetch_import_batch(url)            -> ImportBatch (new value on every fetch)
  batch.toggle(id) / batch.set_all() -> selection only, nothing persisted
  commit_batch(batch, destination)   -> CommitReport ("{imported}/{attempted} imported")

Commit is sequential and best-effort: each selected row is written on its own,
failures are counted and logged, and the batch is never rolled back as a whole.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Callable, List, Optional

from config import settings
from core import http_client
from db.repositories import TieWriteRepository
from domain.models import CommitDestination, ImportCandidate
from parsing import tie_dates, tie_table_parser
from parsing.errors import RowSkipped
from planning.import_batch import ImportBatch

_log = logging.getLogger(__name__)

Fetcher = Callable[[str], str]


class CommitRowFailure(Exception):
    """One create-operation that raised; the batch carries on."""

    def __init__(self, candidate: ImportCandidate, cause: BaseException | None, reason: str):
        super().__init__(f"Row {candidate.id} ({candidate.opponent_name}): {reason}")
        self.candidate = candidate
        self.cause = cause
        self.reason = reason


@dataclass
class CommitReport:
    attempted: int = 0
    imported: int = 0
    skipped_invalid: int = 0
    skipped_existing: int = 0
    created_ids: List[int] = field(default_factory=list)
    failures: List[CommitRowFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.attempted - self.imported

    @property
    def summary(self) -> str:
        return f"{self.imported}/{self.attempted} imported"

    def as_dict(self) -> dict:
        return {
            "attempted": self.attempted,
            "imported": self.imported,
            "skipped_invalid": self.skipped_invalid,
            "skipped_existing": self.skipped_existing,
            "created_ids": list(self.created_ids),
            "failures": [str(f) for f in self.failures],
            "summary": self.summary,
        }


def parse_import_candidates(
    html: str,
    *,
    source_url: str | None = None,
    tz: tzinfo | str | None = None,
    table_class: str = settings.RESULTS_TABLE_CLASS,
    table_index: int = settings.RESULTS_TABLE_INDEX,
) -> ImportBatch:
    """Parse already fetched HTML into a fresh batch. Raises ``TableNotFound``."""
    skipped: List[RowSkipped] = []
    candidates = tie_table_parser.extract_candidates(
        html, tz=tz, table_class=table_class, table_index=table_index, skipped=skipped
    )
    batch = ImportBatch(source_url=source_url, candidates=candidates, skipped_rows=len(skipped))
    _log.info(
        "Staged %d fixtures (%d rows skipped) from %s",
        len(batch),
        batch.skipped_rows,
        source_url or "<html>",
    )
    return batch


def fetch_import_batch(
    url: str,
    *,
    fetcher: Optional[Fetcher] = None,
    tz: tzinfo | str | None = None,
    table_class: str = settings.RESULTS_TABLE_CLASS,
    table_index: int = settings.RESULTS_TABLE_INDEX,
) -> ImportBatch:
    """Fetch ``url`` and stage its fixtures.

    Fetch-phase errors (``InvalidInput``, ``TransportError``, ``UpstreamError``,
    ``TableNotFound``) propagate; nothing is staged in that case.
    """
    url = http_client.validate_url(url)
    html = (fetcher or http_client.fetch)(url)
    return parse_import_candidates(
        html, source_url=url, tz=tz, table_class=table_class, table_index=table_index
    )


def commit_batch(
    batch: ImportBatch,
    destination: CommitDestination,
    writer: TieWriteRepository,
    *,
    skip_existing: bool = False,
) -> CommitReport:
    """Create one tie per selected candidate, in staged order.

    Every selected row counts as attempted. Rows with an invalid timestamp, rows
    already present (with ``skip_existing``) and rows whose existence check or
    create raised are not imported. The batch is cleared afterwards.
    """
    report = CommitReport()
    try:
        for candidate in batch.selected():
            report.attempted += 1
            if not tie_dates.is_valid_iso(candidate.iso_timestamp):
                report.skipped_invalid += 1
                report.failures.append(
                    CommitRowFailure(candidate, None, f"invalid timestamp {candidate.iso_timestamp!r}")
                )
                _log.warning("Not importing row %d: invalid timestamp", candidate.id)
                continue
            try:
                if skip_existing and writer.exists(
                    team_id=destination.team_id,
                    opponent=candidate.opponent_name,
                    tie_date=candidate.iso_timestamp,
                    is_home=candidate.is_home,
                ):
                    report.skipped_existing += 1
                    _log.info("Row %d already imported for %s", candidate.id, destination.label)
                    continue
                tie_id = writer.create(
                    team_id=destination.team_id,
                    season_id=destination.season_id,
                    opponent=candidate.opponent_name,
                    tie_date=candidate.iso_timestamp,
                    location=candidate.location,
                    is_home=candidate.is_home,
                )
            except Exception as e:  # noqa: BLE001 - any writer error fails only this row
                failure = CommitRowFailure(candidate, e, str(e))
                report.failures.append(failure)
                _log.warning("Import of row %d failed: %s", candidate.id, e, exc_info=True)
                continue
            report.imported += 1
            report.created_ids.append(tie_id)
    finally:
        batch.clear()
    _log.info("Commit to %s: %s", destination.label, report.summary)
    return report
