"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from prompter.corpus.models import Prompt, VariableSpec
from prompter.db.connection import Database
from prompter.db.schema import initialize


@pytest.fixture
def tmp_db(tmp_path):
    """File-based usage DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / "usage.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def code_review() -> Prompt:
    """Prompt with one required variable, auto-paste on."""
    return Prompt(
        id="coding/code-review.md",
        name="Code Review",
        description="Review a diff",
        content="Review this {{language}} code for bugs.",
        folder="coding",
        tags=("coding", "review"),
        variables=(VariableSpec(name="language", default="TypeScript", required=True),),
        auto_paste=True,
    )


@pytest.fixture
def commit_message() -> Prompt:
    """Prompt without variables, copy only."""
    return Prompt(
        id="git/commit.md",
        name="Commit Message",
        description="Write a conventional commit message",
        content="Write a commit message for the staged changes.",
        folder="git",
        tags=("git",),
    )
