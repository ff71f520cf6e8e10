"""Domain models for the Prompter usage database."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UsageRecord:
    prompt_id: str
    use_count: int
    last_used: datetime  # timezone-aware UTC
