"""Forward-only migration runner for the usage database schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

_V1_SQL = """
CREATE TABLE IF NOT EXISTS usage (
    prompt_id   TEXT PRIMARY KEY,
    use_count   INTEGER NOT NULL DEFAULT 0 CHECK (use_count >= 0),
    last_used   TEXT NOT NULL
);
"""

# One row per recorded use, for daily/weekly analytics. Not read by ranking.
_V2_SQL = """
CREATE TABLE IF NOT EXISTS usage_events (
    prompt_id   TEXT NOT NULL,
    used_at     TEXT NOT NULL,
    used_on     TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_usage_events_prompt_day
    ON usage_events (prompt_id, used_on);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
    (2, _V2_SQL),
]


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    current = row[0] if row[0] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()
