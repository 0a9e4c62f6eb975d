"""Tests for the import CLI and the tieplanner subcommands."""

from __future__ import annotations

import json
from pathlib import Path

import main as tieplanner_cli
from cli import import_ties
from tests.factories import fixture_row, results_page


def _prepare(tmp_path: Path) -> tuple[Path, Path]:
    page = results_page(
        [
            fixture_row("22.11.2025 10:00", location="Rammenau"),
            fixture_row("29.11.2025 14:00", home="<a href='/c/3'>SV Gast</a>", guest="Own Team"),
            fixture_row("ohne Datum"),
        ]
    )
    html_file = tmp_path / "plan.html"
    html_file.write_text(page, encoding="utf-8")
    db_path = tmp_path / "ties.sqlite"
    code = tieplanner_cli.main(
        ["add-team", "--season", "2025/26", "--team", "Herren 1", "--db", str(db_path)]
    )
    assert code == 0
    return html_file, db_path


def _base_args(html_file: Path, db_path: Path) -> list[str]:
    return [
        "--html-file",
        str(html_file),
        "--season",
        "2025/26",
        "--team",
        "Herren 1",
        "--db",
        str(db_path),
    ]


def test_import_all_json(tmp_path, capsys):
    html_file, db_path = _prepare(tmp_path)
    capsys.readouterr()
    code = import_ties.main(_base_args(html_file, db_path) + ["--json"])
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["commit"]["summary"] == "2/2 imported"
    assert payload["batch"]["skipped_rows"] == 1
    away = payload["batch"]["candidates"][1]
    assert away["opponent"] == "SV Gast" and away["is_home"] is False


def test_exclude_and_skip_existing(tmp_path, capsys):
    html_file, db_path = _prepare(tmp_path)
    assert import_ties.main(_base_args(html_file, db_path) + ["--exclude", "1"]) == 0
    out = capsys.readouterr().out
    assert "1/1 imported" in out
    code = import_ties.main(_base_args(html_file, db_path) + ["--skip-existing"])
    out = capsys.readouterr().out
    assert "1/2 imported" in out
    assert "Already present: 1" in out
    assert code == 1

    assert tieplanner_cli.main(
        ["list-ties", "--season", "2025/26", "--team", "Herren 1", "--db", str(db_path)]
    ) == 0
    listing = capsys.readouterr().out.strip().splitlines()
    assert len(listing) == 2


def test_only_selects_given_ids(tmp_path, capsys):
    html_file, db_path = _prepare(tmp_path)
    capsys.readouterr()
    code = import_ties.main(_base_args(html_file, db_path) + ["--only", "1", "--json"])
    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["commit"]["summary"] == "1/1 imported"
    assert [c["selected"] for c in payload["batch"]["candidates"]] == [False, True]


def test_dry_run_writes_nothing(tmp_path, capsys):
    html_file, db_path = _prepare(tmp_path)
    capsys.readouterr()
    assert import_ties.main(_base_args(html_file, db_path) + ["--dry-run"]) == 0
    assert "Staged 2 fixtures (2 selected, 1 rows skipped)" in capsys.readouterr().out
    tieplanner_cli.main(
        ["list-ties", "--season", "2025/26", "--team", "Herren 1", "--db", str(db_path)]
    )
    assert capsys.readouterr().out.strip() == ""


def test_unknown_destination_and_bad_source(tmp_path, capsys):
    html_file, db_path = _prepare(tmp_path)
    args = _base_args(html_file, db_path)
    args[args.index("Herren 1")] = "Herren 9"
    assert import_ties.main(args) == 2
    assert import_ties.main(
        ["--url", "ftp://example.org", "--season", "x", "--team", "y", "--db", str(db_path)]
    ) == 2
    assert "Fetch failed" in capsys.readouterr().err


def test_preview_and_proxy_fetch_commands(tmp_path, capsys):
    html_file, _ = _prepare(tmp_path)
    capsys.readouterr()
    assert tieplanner_cli.main(["preview", "--html-file", str(html_file)]) == 0
    out = capsys.readouterr().out
    assert "Rammenau" in out
    assert "2 fixtures staged, 1 rows skipped" in out
    assert tieplanner_cli.main(["proxy-fetch", "--url", "gopher://x"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == 400
