"""Frecency tracking: usage counters in, bounded ranking signal out.

Score formula (never persisted; recomputed from the UsageRecord):

    frequency = 1 - exp(-use_count / frequency_scale)      diminishing returns
    recency   = 0.5 ** (age_days / half_life_days)          exponential decay
    score     = frequency * recency                         in [0, 1)

Defaults: half_life_days = 14.0, frequency_scale = 5.0. A prompt used five
times today scores ~0.63; the same prompt untouched for two weeks ~0.32.

Counters live behind the injected UsageStore; FrecencyTracker never caches
them, so every snapshot reflects the store at the time it is taken.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Protocol

from prompter.db.models import UsageRecord
from prompter.errors import UsageRecordError

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86_400.0


@dataclass
class FrecencyConfig:
    half_life_days: float = 14.0
    frequency_scale: float = 5.0


class UsageStore(Protocol):
    """Narrow get/record interface over the usage counters."""

    def increment(self, prompt_id: str, used_at: datetime) -> UsageRecord: ...

    def get(self, prompt_id: str) -> UsageRecord | None: ...

    def all(self) -> list[UsageRecord]: ...

    def daily_counts(self, prompt_id: str, since: date) -> dict[str, int]: ...


class InMemoryUsageStore:
    """Thread-safe in-process UsageStore (tests, ephemeral sessions)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, UsageRecord] = {}
        self._events: list[tuple[str, datetime]] = []

    def increment(self, prompt_id: str, used_at: datetime) -> UsageRecord:
        with self._lock:
            current = self._records.get(prompt_id)
            count = current.use_count + 1 if current else 1
            last = used_at if current is None else max(current.last_used, used_at)
            record = UsageRecord(prompt_id=prompt_id, use_count=count, last_used=last)
            self._records[prompt_id] = record
            self._events.append((prompt_id, used_at))
            return record

    def get(self, prompt_id: str) -> UsageRecord | None:
        with self._lock:
            return self._records.get(prompt_id)

    def all(self) -> list[UsageRecord]:
        with self._lock:
            return list(self._records.values())

    def daily_counts(self, prompt_id: str, since: date) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for pid, used_at in self._events:
                day = used_at.astimezone(timezone.utc).date()
                if pid == prompt_id and day >= since:
                    counts[day.isoformat()] = counts.get(day.isoformat(), 0) + 1
        return counts


class FrecencySnapshot(Mapping[str, float]):
    """Immutable point-in-time mapping of prompt id → frecency score.

    Ids without usage are absent and read as 0.0 through ``score()``.
    """

    def __init__(self, scores: Mapping[str, float] | None = None) -> None:
        self._scores = dict(scores or {})

    def score(self, prompt_id: str) -> float:
        return self._scores.get(prompt_id, 0.0)

    def __getitem__(self, prompt_id: str) -> float:
        return self._scores[prompt_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)


class FrecencyTracker:
    """Records prompt usage and derives frecency scores from a UsageStore."""

    def __init__(self, store: UsageStore, config: FrecencyConfig | None = None) -> None:
        self._store = store
        self._config = config or FrecencyConfig()
        if self._config.half_life_days <= 0:
            raise ValueError("half_life_days must be > 0")
        if self._config.frequency_scale <= 0:
            raise ValueError("frequency_scale must be > 0")

    def record_use(self, prompt_id: str, timestamp: datetime | None = None) -> UsageRecord:
        """Increment the use counter for *prompt_id* and update its last-used time.

        At-least-once: a retried call may count twice but never loses an
        increment, because the store increments atomically.

        Raises:
            UsageRecordError: If the store rejects the write.
        """
        used_at = _as_utc(timestamp) if timestamp is not None else _utcnow()
        try:
            record = self._store.increment(prompt_id, used_at)
        except Exception as exc:
            raise UsageRecordError(f"Failed to record usage for '{prompt_id}': {exc}") from exc
        logger.debug("Recorded use of %s (count=%d)", prompt_id, record.use_count)
        return record

    def score(self, prompt_id: str, now: datetime | None = None) -> float:
        record = self._store.get(prompt_id)
        if record is None:
            return 0.0
        return frecency_score(record, now or _utcnow(), self._config)

    def snapshot(self, now: datetime | None = None) -> FrecencySnapshot:
        """Score every known prompt at one instant *now*."""
        at = now or _utcnow()
        return FrecencySnapshot(
            {r.prompt_id: frecency_score(r, at, self._config) for r in self._store.all()}
        )

    def records(self) -> list[UsageRecord]:
        return self._store.all()

    def daily_usage(self, prompt_id: str, days: int = 7, today: date | None = None) -> dict[str, int]:
        """Return {YYYY-MM-DD: uses} for the last *days* days (missing days omitted)."""
        end = today or _utcnow().date()
        return self._store.daily_counts(prompt_id, end - timedelta(days=days - 1))


def frecency_score(record: UsageRecord, now: datetime, config: FrecencyConfig) -> float:
    """Bounded frecency score in [0, 1) for *record* evaluated at *now*."""
    if record.use_count <= 0:
        return 0.0
    age_days = max(0.0, (_as_utc(now) - _as_utc(record.last_used)).total_seconds() / _SECONDS_PER_DAY)
    frequency = 1.0 - math.exp(-record.use_count / config.frequency_scale)
    recency = 0.5 ** (age_days / config.half_life_days)
    return frequency * recency


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
