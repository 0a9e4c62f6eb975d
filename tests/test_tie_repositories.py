from __future__ import annotations

import pytest

from db import get_existing_tables
from db.repositories import (
    SeasonRepository,
    TeamRepository,
    TieRepository,
    TieWriteRepository,
)
from tests.factories import create_destination, make_conn


def test_schema_tables_present():
    tables = get_existing_tables(make_conn())
    assert {"season", "team", "tie", "schema_meta"} <= set(tables)


def test_season_and_team_upsert_idempotent():
    c = make_conn()
    seasons = SeasonRepository(c)
    teams = TeamRepository(c)
    sid = seasons.upsert("2025/26", "2025-08-01", "2026-05-31", is_active=True)
    assert seasons.upsert("2025/26") == sid
    tid = teams.upsert(sid, "Herren 1", "Bezirksliga")
    assert teams.upsert(sid, "Herren 1") == tid
    assert seasons.get_by_name("2025/26").is_active is True
    assert [t.name for t in teams.list_by_season(sid)] == ["Herren 1"]
    assert teams.get_by_id(tid).league == "Bezirksliga"


def test_resolve_label_pair():
    c = make_conn()
    dest = create_destination(c, season="2024/25", team="Damen 1")
    assert dest.team_name == "Damen 1"
    assert dest.label == "Damen 1 (2024/25)"
    with pytest.raises(LookupError):
        TeamRepository(c).resolve("Damen 1", "2030/31")


def test_tie_create_list_and_exists():
    c = make_conn()
    dest = create_destination(c)
    repo = TieRepository(c)
    assert isinstance(repo, TieWriteRepository)
    tie_id = repo.create(
        team_id=dest.team_id,
        season_id=dest.season_id,
        opponent="TTC Muster",
        tie_date="2025-11-22T10:00:00+01:00",
        location="",
        is_home=False,
    )
    (row,) = repo.list_by_team(dest.team_id)
    assert row.tie_id == tie_id
    assert row.is_home is False
    assert row.location is None
    assert repo.exists(
        team_id=dest.team_id,
        opponent="TTC Muster",
        tie_date="2025-11-22T10:00:00+01:00",
        is_home=False,
    )
    assert not repo.exists(
        team_id=dest.team_id,
        opponent="TTC Muster",
        tie_date="2025-11-22T10:00:00+01:00",
        is_home=True,
    )


def test_tie_create_rejects_unknown_team_or_season_mismatch():
    c = make_conn()
    dest = create_destination(c)
    repo = TieRepository(c)
    kwargs = dict(opponent="X", tie_date="2025-11-22T10:00:00", location=None, is_home=True)
    with pytest.raises(ValueError):
        repo.create(team_id=999, season_id=dest.season_id, **kwargs)
    with pytest.raises(ValueError):
        repo.create(team_id=dest.team_id, season_id=dest.season_id + 1, **kwargs)
    assert repo.list_by_team(dest.team_id) == []


def test_ties_list_by_instant_across_offsets():
    c = make_conn()
    dest = create_destination(c)
    repo = TieRepository(c)
    # 09:30 UTC sorts lexically before 10:00+01:00 but happens later
    for opponent, when in [
        ("Late", "2025-11-22T09:30:00+00:00"),
        ("Early", "2025-11-22T10:00:00+01:00"),
        ("Next day", "2025-11-23T00:00:00"),
    ]:
        repo.create(
            team_id=dest.team_id,
            season_id=dest.season_id,
            opponent=opponent,
            tie_date=when,
            location=None,
            is_home=True,
        )
    assert [t.opponent for t in repo.list_by_team(dest.team_id)] == ["Early", "Late", "Next day"]
