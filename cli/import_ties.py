"""Tie import CLI

Fetches a club results page (or reads a saved copy), stages the fixtures found
in its results table and commits the selected ones to one team of one season.

Features:
 - Selection: everything is selected by default; ``--exclude`` drops ids,
   ``--only`` starts from an empty selection and adds the given ids.
 - ``--dry-run`` prints the staged batch without writing.
 - ``--skip-existing`` leaves out fixtures already stored for the team.
 - Emits either a human-readable summary or JSON (via ``--json``).
 - Exit code 0 when every attempted row was imported, 1 on a partial import,
   2 when the fetch or destination lookup failed.

Example (from the repository root; the packages live under ``src/``):
  PYTHONPATH=src python cli/import_ties.py --url https://example.org/results --season 2025/26 --team "Herren 1"
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict

from config import settings
from config.logging_config import configure_logging
from core import filesystem, http_client
from db import schema
from db.repositories import TeamRepository, TieRepository
from parsing.errors import TableNotFound
from planning.import_batch import ImportBatch
from services import tie_import


def _id_list(raw: str | None) -> list[int]:
    if not raw:
        return []
    return [int(part) for part in raw.split(",") if part.strip()]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import fixtures from a club results page")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--url", help="Results page URL (http/https)")
    src.add_argument("--html-file", help="Previously saved results page")
    p.add_argument("--season", required=True, help="Season name of the destination team")
    p.add_argument("--team", required=True, help="Destination team name")
    p.add_argument("--db", default=settings.DB_PATH, help="SQLite database file path")
    p.add_argument("--exclude", help="Comma separated candidate ids to deselect")
    p.add_argument("--only", help="Comma separated candidate ids to import (all others deselected)")
    p.add_argument("--skip-existing", action="store_true", help="Skip fixtures already stored")
    p.add_argument("--save-html", help="Write the fetched page to this path")
    p.add_argument("--dry-run", action="store_true", help="Stage and print, do not write")
    p.add_argument("--json", action="store_true", help="Emit JSON instead of human-readable text")
    return p.parse_args(argv)


def apply_selection(batch: ImportBatch, only: list[int], exclude: list[int]) -> None:
    if only:
        batch.set_all(False)
        for cid in only:
            batch.set_selected(cid, True)
    for cid in exclude:
        batch.set_selected(cid, False)


def _batch_to_dict(batch: ImportBatch) -> Dict[str, Any]:
    return {
        "source": batch.source_url,
        "skipped_rows": batch.skipped_rows,
        "candidates": [
            {
                "id": c.id,
                "opponent": c.opponent_name,
                "date_text": c.raw_date_text,
                "timestamp": c.iso_timestamp,
                "location": c.location,
                "is_home": c.is_home,
                "selected": c.selected,
                "needs_review": c.needs_review,
            }
            for c in batch
        ],
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()
    try:
        if args.html_file:
            html = filesystem.read_text(args.html_file)
            source = args.html_file
        else:
            source = http_client.validate_url(args.url)
            html = http_client.fetch(source)
        if args.save_html:
            filesystem.write_text(args.save_html, html)
        batch = tie_import.parse_import_candidates(html, source_url=source)
        apply_selection(batch, _id_list(args.only), _id_list(args.exclude))
    except (http_client.HttpError, TableNotFound, OSError) as e:
        print(f"Fetch failed: {e}", file=sys.stderr)
        return 2
    except (KeyError, ValueError) as e:
        print(f"Invalid selection: {e}", file=sys.stderr)
        return 2

    staged = _batch_to_dict(batch)
    if args.dry_run:
        if args.json:
            print(json.dumps({"batch": staged}, ensure_ascii=False, indent=2))
        else:
            selected = len(batch.selected())
            print(f"Staged {len(batch)} fixtures ({selected} selected, {batch.skipped_rows} rows skipped)")
            for c in staged["candidates"]:
                mark = "x" if c["selected"] else " "
                print(f"  [{mark}] {c['id']:>3} {c['timestamp']} {c['opponent']}")
        return 0

    conn = schema.connect(args.db)
    try:
        destination = TeamRepository(conn).resolve(args.team, args.season)
        report = tie_import.commit_batch(
            batch, destination, TieRepository(conn), skip_existing=args.skip_existing
        )
    except LookupError as e:
        print(str(e), file=sys.stderr)
        return 2
    finally:
        conn.close()

    if args.json:
        print(json.dumps({"batch": staged, "commit": report.as_dict()}, ensure_ascii=False, indent=2))
    else:
        print(f"Import into {destination.label}: {report.summary}")
        if report.skipped_existing:
            print(f"  Already present: {report.skipped_existing}")
        for failure in report.failures[:5]:
            print(f"  ! {failure}")
    return 0 if report.imported == report.attempted else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
