"""Repository layer

Typed repository interfaces separating read and write concerns. Concrete
implementations operate over a provided sqlite3.Connection.

The tie importer depends only on ``TieWriteRepository`` so tests can pass a
test double instead of a database.
"""

from __future__ import annotations

from typing import Protocol, Optional, runtime_checkable, Sequence
import sqlite3

from domain.models import CommitDestination, SeasonRow, TeamRow, TieRow


@runtime_checkable
class SeasonReadRepository(Protocol):
    def get_by_name(self, name: str) -> Optional[SeasonRow]: ...  # pragma: no cover
    def list_all(self) -> Sequence[SeasonRow]: ...  # pragma: no cover


@runtime_checkable
class TeamReadRepository(Protocol):
    def get_by_id(self, team_id: int) -> Optional[TeamRow]: ...  # pragma: no cover
    def list_by_season(self, season_id: int) -> Sequence[TeamRow]: ...  # pragma: no cover


@runtime_checkable
class TieWriteRepository(Protocol):
    def create(
        self,
        *,
        team_id: int,
        season_id: int,
        opponent: str,
        tie_date: str,
        location: Optional[str],
        is_home: bool,
        notes: Optional[str] = None,
    ) -> int: ...  # pragma: no cover

    def exists(
        self, *, team_id: int, opponent: str, tie_date: str, is_home: bool
    ) -> bool: ...  # pragma: no cover


# ---- Concrete Implementations ----


class _BaseRepo:
    def __init__(self, conn: sqlite3.Connection):
        self._c = conn


class SeasonRepository(_BaseRepo, SeasonReadRepository):
    _COLS = "season_id, name, start_date, end_date, is_active"

    def upsert(
        self,
        name: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        is_active: bool = False,
    ) -> int:
        cur = self._c.cursor()
        cur.execute(
            "INSERT INTO season(name, start_date, end_date, is_active) VALUES(?, ?, ?, ?) "
            "ON CONFLICT(name) DO NOTHING",
            (name, start_date, end_date, int(is_active)),
        )
        cur.execute("SELECT season_id FROM season WHERE name=?", (name,))
        season_id = int(cur.fetchone()[0])
        self._c.commit()
        return season_id

    def get_by_name(self, name: str) -> Optional[SeasonRow]:
        cur = self._c.cursor()
        cur.execute(f"SELECT {self._COLS} FROM season WHERE name=?", (name,))
        row = cur.fetchone()
        return self._row(row) if row else None

    def list_all(self) -> Sequence[SeasonRow]:
        cur = self._c.cursor()
        cur.execute(f"SELECT {self._COLS} FROM season ORDER BY start_date DESC, name")
        return [self._row(r) for r in cur.fetchall()]

    @staticmethod
    def _row(r) -> SeasonRow:
        return SeasonRow(r[0], r[1], r[2], r[3], bool(r[4]))


class TeamRepository(_BaseRepo, TeamReadRepository):
    def upsert(self, season_id: int, name: str, league: Optional[str] = None) -> int:
        cur = self._c.cursor()
        cur.execute(
            "INSERT INTO team(season_id, name, league) VALUES(?, ?, ?) "
            "ON CONFLICT(season_id, name) DO NOTHING",
            (season_id, name, league),
        )
        cur.execute(
            "SELECT team_id FROM team WHERE season_id=? AND name=?",
            (season_id, name),
        )
        team_id = int(cur.fetchone()[0])
        self._c.commit()
        return team_id

    def get_by_id(self, team_id: int) -> Optional[TeamRow]:
        cur = self._c.cursor()
        cur.execute(
            "SELECT team_id, season_id, name, league FROM team WHERE team_id=?",
            (team_id,),
        )
        row = cur.fetchone()
        return TeamRow(*row) if row else None

    def list_by_season(self, season_id: int) -> Sequence[TeamRow]:
        cur = self._c.cursor()
        cur.execute(
            "SELECT team_id, season_id, name, league FROM team WHERE season_id=? ORDER BY name",
            (season_id,),
        )
        return [TeamRow(*r) for r in cur.fetchall()]

    def resolve(self, team_name: str, season_name: str) -> CommitDestination:
        """Map a (team, season) label pair to ids; ``LookupError`` if unknown."""
        cur = self._c.cursor()
        cur.execute(
            "SELECT t.team_id, s.season_id FROM team t "
            "JOIN season s ON s.season_id = t.season_id "
            "WHERE t.name=? AND s.name=?",
            (team_name, season_name),
        )
        row = cur.fetchone()
        if not row:
            raise LookupError(f"Team {team_name!r} not found in season {season_name!r}")
        return CommitDestination(
            team_id=int(row[0]),
            season_id=int(row[1]),
            team_name=team_name,
            season_name=season_name,
        )


class TieRepository(_BaseRepo, TieWriteRepository):
    def create(
        self,
        *,
        team_id: int,
        season_id: int,
        opponent: str,
        tie_date: str,
        location: Optional[str],
        is_home: bool,
        notes: Optional[str] = None,
    ) -> int:
        # Each insert is its own transaction; a failed row leaves earlier ones in place
        with self._c:
            cur = self._c.cursor()
            cur.execute("SELECT season_id FROM team WHERE team_id=?", (team_id,))
            row = cur.fetchone()
            if not row:
                raise ValueError(f"Unknown team {team_id}")
            if int(row[0]) != season_id:
                raise ValueError(f"Team {team_id} does not belong to season {season_id}")
            cur.execute(
                "INSERT INTO tie(team_id, opponent, tie_date, location, is_home, notes) "
                "VALUES(?,?,?,?,?,?)",
                (team_id, opponent, tie_date, location or None, int(is_home), notes),
            )
            return int(cur.lastrowid)

    def exists(self, *, team_id: int, opponent: str, tie_date: str, is_home: bool) -> bool:
        cur = self._c.cursor()
        cur.execute(
            "SELECT 1 FROM tie WHERE team_id=? AND opponent=? AND tie_date=? AND is_home=? LIMIT 1",
            (team_id, opponent, tie_date, int(is_home)),
        )
        return cur.fetchone() is not None

    def list_by_team(self, team_id: int) -> Sequence[TieRow]:
        """Ties in chronological order; offsets are applied, naive dates read as UTC."""
        cur = self._c.cursor()
        cur.execute(
            "SELECT tie_id, team_id, opponent, tie_date, location, is_home, notes "
            "FROM tie WHERE team_id=? ORDER BY julianday(tie_date), tie_id",
            (team_id,),
        )
        return [
            TieRow(r[0], r[1], r[2], r[3], r[4], bool(r[5]), r[6]) for r in cur.fetchall()
        ]


__all__ = [
    "SeasonReadRepository",
    "TeamReadRepository",
    "TieWriteRepository",
    "SeasonRepository",
    "TeamRepository",
    "TieRepository",
]
