"""Keep-latest coalescing for query edits.

Each push replaces the pending query and restarts the delay; poll() hands
the query out once the delay has elapsed since the last push. A burst of
keystrokes therefore costs one ranking call, made with the final text.
Superseded queries are dropped.

The coalescer owns no timer. The driver decides the cadence and passes
monotonic timestamps in (seconds).
"""

from __future__ import annotations

import threading


class QueryCoalescer:
    def __init__(self, delay_ms: int = 150) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.delay = delay_ms / 1000
        self._lock = threading.Lock()
        self._pending: str | None = None
        self._pushed_at = 0.0

    def push(self, query: str, now: float) -> None:
        with self._lock:
            self._pending = query
            self._pushed_at = now

    def poll(self, now: float) -> str | None:
        """Return the pending query if it has settled, else None."""
        with self._lock:
            if self._pending is None or now - self._pushed_at < self.delay:
                return None
            query, self._pending = self._pending, None
            return query

    def flush(self) -> str | None:
        """Return the pending query immediately, regardless of the delay."""
        with self._lock:
            query, self._pending = self._pending, None
            return query

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def due_at(self) -> float | None:
        """Monotonic time at which the pending query settles, or None."""
        with self._lock:
            if self._pending is None:
                return None
            return self._pushed_at + self.delay
