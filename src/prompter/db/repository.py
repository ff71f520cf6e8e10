"""Repository for prompt usage counters (the persistent UsageStore).

Counters are incremented with a single UPSERT statement, so concurrent
increments for the same prompt are never lost (at-least-once semantics: a
retried call may double count, it cannot undercount).
"""

from __future__ import annotations

import sqlite3
import threading
from datetime import date, datetime, timezone

from prompter.db.models import UsageRecord
from prompter.errors import UsageRecordError


class UsageRepository:
    """Data access layer for usage counters and the usage event log.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see prompter.db.schema.initialize).
        """
        self._conn = conn
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def increment(self, prompt_id: str, used_at: datetime) -> UsageRecord:
        """Add one use for *prompt_id* and return the updated record.

        last_used only moves forward: an out-of-order timestamp still counts
        but does not rewind recency.
        """
        stamp = _to_iso(used_at)
        with self._write_lock:
            self._conn.execute(
                """
                INSERT INTO usage (prompt_id, use_count, last_used)
                VALUES (?, 1, ?)
                ON CONFLICT(prompt_id) DO UPDATE SET
                    use_count = use_count + 1,
                    last_used = MAX(last_used, excluded.last_used)
                """,
                (prompt_id, stamp),
            )
            self._conn.execute(
                "INSERT INTO usage_events (prompt_id, used_at, used_on) VALUES (?, ?, ?)",
                (prompt_id, stamp, stamp[:10]),
            )
            self._conn.commit()
            record = self.get(prompt_id)
        if record is None:
            raise UsageRecordError(f"Usage row for {prompt_id!r} missing after write")
        return record

    def get(self, prompt_id: str) -> UsageRecord | None:
        """Return the usage record for *prompt_id*, or None if never used."""
        row = self._conn.execute(
            "SELECT prompt_id, use_count, last_used FROM usage WHERE prompt_id = ?",
            (prompt_id,),
        ).fetchone()
        return _row_to_record(row) if row else None

    def all(self) -> list[UsageRecord]:
        """Return every usage record, most used first."""
        rows = self._conn.execute(
            "SELECT prompt_id, use_count, last_used FROM usage ORDER BY use_count DESC, prompt_id"
        ).fetchall()
        return [_row_to_record(r) for r in rows]

    # ------------------------------------------------------------------
    # Event log (analytics only)
    # ------------------------------------------------------------------

    def daily_counts(self, prompt_id: str, since: date) -> dict[str, int]:
        """Return {YYYY-MM-DD: uses} for days on or after *since* (UTC)."""
        rows = self._conn.execute(
            """
            SELECT used_on, COUNT(*) AS uses FROM usage_events
            WHERE prompt_id = ? AND used_on >= ?
            GROUP BY used_on ORDER BY used_on
            """,
            (prompt_id, since.isoformat()),
        ).fetchall()
        return {r["used_on"]: r["uses"] for r in rows}


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------


def _to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # Fixed-width UTC ISO strings compare correctly as text (MAX() above).
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _row_to_record(row: sqlite3.Row) -> UsageRecord:
    last_used = datetime.strptime(row["last_used"], "%Y-%m-%dT%H:%M:%S.%fZ")
    return UsageRecord(
        prompt_id=row["prompt_id"],
        use_count=row["use_count"],
        last_used=last_used.replace(tzinfo=timezone.utc),
    )
