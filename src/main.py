"""CLI entry point for TiePlanner import utilities."""

from __future__ import annotations
import argparse
import json
import sys

from config import settings
from config.logging_config import configure_logging
from core import filesystem, http_client
from db import schema
from db.repositories import SeasonRepository, TeamRepository, TieRepository
from parsing.errors import TableNotFound
from planning.import_batch import ImportBatch
from services import proxy, tie_import


def format_batch(batch: ImportBatch) -> list[str]:
    lines = []
    for c in batch:
        mark = "x" if c.selected else " "
        side = "Home" if c.is_home else "Away"
        review = "  (check home/away)" if c.needs_review else ""
        lines.append(
            f"[{mark}] {c.id:>3}  {c.iso_timestamp:<25}  {side:<4}  {c.opponent_name}"
            f"  @ {c.location or '-'}{review}"
        )
    return lines


def load_batch(url: str | None, html_file: str | None) -> ImportBatch:
    if html_file:
        return tie_import.parse_import_candidates(
            filesystem.read_text(html_file), source_url=html_file
        )
    return tie_import.fetch_import_batch(url or "")


def cmd_add_team(args: argparse.Namespace) -> int:
    conn = schema.connect(args.db)
    try:
        season_id = SeasonRepository(conn).upsert(args.season)
        team_id = TeamRepository(conn).upsert(season_id, args.team, args.league)
    finally:
        conn.close()
    print(json.dumps({"season_id": season_id, "team_id": team_id}))
    return 0


def cmd_proxy_fetch(args: argparse.Namespace) -> int:
    status, body = proxy.handle_proxy_fetch({"url": args.url})
    print(json.dumps({"status": status, **body}, ensure_ascii=False))
    return 0 if status == 200 else 1


def cmd_preview(args: argparse.Namespace) -> int:
    try:
        batch = load_batch(args.url, args.html_file)
    except (http_client.HttpError, TableNotFound) as e:
        print(f"Fetch failed: {e}", file=sys.stderr)
        return 2
    for line in format_batch(batch):
        print(line)
    print(f"{len(batch)} fixtures staged, {batch.skipped_rows} rows skipped")
    return 0


def cmd_list_ties(args: argparse.Namespace) -> int:
    conn = schema.connect(args.db)
    try:
        dest = TeamRepository(conn).resolve(args.team, args.season)
        ties = TieRepository(conn).list_by_team(dest.team_id)
    except LookupError as e:
        print(str(e), file=sys.stderr)
        return 2
    finally:
        conn.close()
    for t in ties:
        side = "Home" if t.is_home else "Away"
        print(f"{t.tie_id:>4}  {t.tie_date:<25}  {side:<4}  {t.opponent}  @ {t.location or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tieplanner")
    p.add_argument("--log-level", default=None, help="Logging level (default: TIEPLANNER_LOG_LEVEL)")
    sub = p.add_subparsers(dest="command", required=True)

    add_team = sub.add_parser("add-team", help="Create a season/team pair to import into")
    add_team.add_argument("--season", required=True, help="Season name, e.g. 2025/26")
    add_team.add_argument("--team", required=True, help="Team name")
    add_team.add_argument("--league", required=False, help="League label")
    add_team.add_argument("--db", default=settings.DB_PATH, help="SQLite database path")
    add_team.set_defaults(func=cmd_add_team)

    proxy_fetch = sub.add_parser("proxy-fetch", help="Fetch a page through the proxy boundary")
    proxy_fetch.add_argument("--url", required=True)
    proxy_fetch.set_defaults(func=cmd_proxy_fetch)

    preview = sub.add_parser("preview", help="Parse a results page and show the staged fixtures")
    src = preview.add_mutually_exclusive_group(required=True)
    src.add_argument("--url", help="Results page URL")
    src.add_argument("--html-file", help="Saved results page")
    preview.set_defaults(func=cmd_preview)

    list_ties = sub.add_parser("list-ties", help="List persisted ties of a team")
    list_ties.add_argument("--season", required=True)
    list_ties.add_argument("--team", required=True)
    list_ties.add_argument("--db", default=settings.DB_PATH, help="SQLite database path")
    list_ties.set_defaults(func=cmd_list_ties)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
