"""Prompter usage database layer."""

from prompter.db.connection import Database
from prompter.db.migrations import MIGRATIONS, run_migrations
from prompter.db.models import UsageRecord
from prompter.db.repository import UsageRepository
from prompter.db.schema import initialize

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
    "UsageRecord",
    "UsageRepository",
]
