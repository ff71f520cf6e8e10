"""Fixtures for CLI tests: isolated config, a small prompt library, fake clipboard."""

from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

import prompter.cli.init
import prompter.cli.library
import prompter.cli.search
import prompter.cli.stats
import prompter.cli.use
import prompter.config
from prompter.errors import ClipboardError

_CODE_REVIEW = """\
---
name: Code Review
description: Review a diff
tags: [coding, review]
variables:
  - name: language
    required: true
  - name: focus
    default: correctness
auto_paste: true
---
Review this {{language}} code. Focus on {{focus}}.
"""

_COMMIT = """\
---
name: Commit Message
description: Write a conventional commit message
tags: [git]
---
Write a commit message for the staged changes.
"""


class FakeClipboard:
    instances: list["FakeClipboard"] = []
    fail = False

    def __init__(self) -> None:
        self.writes: list[str] = []
        self.pastes = 0
        FakeClipboard.instances.append(self)

    def write_clipboard(self, text: str) -> None:
        if FakeClipboard.fail:
            raise ClipboardError("no clipboard mechanism")
        self.writes.append(text)

    def trigger_paste(self) -> None:
        self.pastes += 1


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch):
    """No real home config, no env overrides, wide consoles, cwd in tmp."""
    monkeypatch.setattr(prompter.config, "_GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    monkeypatch.delenv("PROMPTER_PROMPTS_DIR", raising=False)
    monkeypatch.delenv("PROMPTER_DB", raising=False)
    monkeypatch.chdir(tmp_path)
    for module in (prompter.cli.init, prompter.cli.library, prompter.cli.search, prompter.cli.stats, prompter.cli.use):
        monkeypatch.setattr(module, "console", Console(width=200))


@pytest.fixture
def clipboard(monkeypatch):
    FakeClipboard.instances = []
    FakeClipboard.fail = False
    monkeypatch.setattr(prompter.cli.use, "SystemClipboard", FakeClipboard)
    return FakeClipboard


@pytest.fixture
def library(tmp_path: Path) -> Path:
    root = tmp_path / "prompts"
    (root / "git").mkdir(parents=True)
    (root / "code-review.md").write_text(_CODE_REVIEW, encoding="utf-8")
    (root / "git" / "commit.md").write_text(_COMMIT, encoding="utf-8")
    return root


@pytest.fixture
def lib_args(library: Path, tmp_path: Path) -> list[str]:
    return ["--prompts-dir", str(library), "--db", str(tmp_path / "usage.db")]
