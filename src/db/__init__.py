"""Database package exposing schema application helpers and repositories.

The SQLite database is the write target of the tie importer.
"""

from .schema import apply_schema, connect, get_existing_tables  # noqa: F401
from .repositories import (  # noqa: F401
    SeasonRepository,
    TeamRepository,
    TieRepository,
    SeasonReadRepository,
    TeamReadRepository,
    TieWriteRepository,
)

__all__ = [
    "apply_schema",
    "connect",
    "get_existing_tables",
    "SeasonRepository",
    "TeamRepository",
    "TieRepository",
    "SeasonReadRepository",
    "TeamReadRepository",
    "TieWriteRepository",
]
