"""SQLite Schema Definitions

Tables for seasons, teams and ties (fixtures). Provides helpers to open a
connection and apply the schema.

Design Principles:
 - Singular table names
 - Foreign keys enforced (``connect`` enables PRAGMA foreign_keys=ON)
 - Tie timestamps stored as ISO-8601 text including the UTC offset when known
 - No uniqueness over ties; duplicate fixtures are the importer's concern
"""

from __future__ import annotations
import os
import sqlite3

SCHEMA_VERSION = 1

# DDL statements (ordered for FK dependencies)
DDL: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS schema_meta (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS season (
        season_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        start_date TEXT,
        end_date TEXT,
        is_active INTEGER NOT NULL DEFAULT 0,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS team (
        team_id INTEGER PRIMARY KEY,
        season_id INTEGER NOT NULL REFERENCES season(season_id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        league TEXT,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP,
        UNIQUE(season_id, name)
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS tie (
        tie_id INTEGER PRIMARY KEY,
        team_id INTEGER NOT NULL REFERENCES team(team_id) ON DELETE CASCADE,
        opponent TEXT NOT NULL,
        tie_date TEXT NOT NULL,
        location TEXT,
        is_home INTEGER NOT NULL DEFAULT 1,
        notes TEXT,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );
    """.strip(),
    "CREATE INDEX IF NOT EXISTS idx_team_season ON team(season_id)",
    "CREATE INDEX IF NOT EXISTS idx_tie_team_date ON tie(team_id, tie_date)",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()
    for stmt in DDL:
        cur.execute(stmt)
    cur.execute(
        "INSERT OR REPLACE INTO schema_meta(key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    conn.commit()


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    cur = conn.cursor()
    cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
    return sorted(r[0] for r in cur.fetchall())


def connect(path: str = ":memory:") -> sqlite3.Connection:
    """Open ``path`` with foreign keys on and the schema applied."""
    if path != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA foreign_keys=ON")
    apply_schema(conn)
    return conn
