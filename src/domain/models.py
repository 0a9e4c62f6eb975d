"""Domain models for the tie import pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ImportCandidate:
    """One parsed fixture row awaiting commit.

    ``iso_timestamp`` is never empty for a staged candidate; rows whose date
    could not be parsed are dropped before staging.
    """

    id: int
    opponent_name: str
    raw_date_text: str
    iso_timestamp: str
    location: str
    is_home: bool
    selected: bool = True
    # Neither or both side cells were linked; home/away is the default guess
    needs_review: bool = False


@dataclass(frozen=True, slots=True)
class CommitDestination:
    """The single team/season every row of one import is written to."""

    team_id: int
    season_id: int
    team_name: str = ""
    season_name: str = ""

    @property
    def label(self) -> str:
        return f"{self.team_name} ({self.season_name})" if self.team_name else str(self.team_id)


@dataclass(frozen=True, slots=True)
class SeasonRow:
    season_id: int
    name: str
    start_date: Optional[str]
    end_date: Optional[str]
    is_active: bool


@dataclass(frozen=True, slots=True)
class TeamRow:
    team_id: int
    season_id: int
    name: str
    league: Optional[str]


@dataclass(frozen=True, slots=True)
class TieRow:
    tie_id: int
    team_id: int
    opponent: str
    tie_date: str
    location: Optional[str]
    is_home: bool
    notes: Optional[str]
