"""Tests for corpus providers and prompt lookup."""

from __future__ import annotations

from pathlib import Path

import pytest

from prompter.corpus.models import Prompt
from prompter.corpus.provider import FileCorpusProvider, StaticCorpusProvider, find_prompt
from prompter.errors import CorpusLoadError


def _write(root: Path, rel: str, name: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\nname: {name}\n---\nbody of {name}", encoding="utf-8")


def test_static_provider_returns_copy():
    prompts = [Prompt(id="a", name="A")]
    provider = StaticCorpusProvider(prompts)
    got = provider.get_all_prompts()
    got.clear()
    assert len(provider.get_all_prompts()) == 1


def test_file_provider_loads_nested_files(tmp_path: Path):
    _write(tmp_path, "a.md", "Alpha")
    _write(tmp_path, "git/commit.md", "Commit")
    prompts = FileCorpusProvider(tmp_path).get_all_prompts()
    assert {p.id for p in prompts} == {"a.md", "git/commit.md"}


def test_file_provider_ignores_other_extensions_and_hidden_dirs(tmp_path: Path):
    _write(tmp_path, "a.md", "Alpha")
    (tmp_path / "notes.txt").write_text("not a prompt", encoding="utf-8")
    _write(tmp_path, ".trash/old.md", "Old")
    prompts = FileCorpusProvider(tmp_path).get_all_prompts()
    assert [p.id for p in prompts] == ["a.md"]


def test_file_provider_skips_malformed_files(tmp_path: Path):
    _write(tmp_path, "good.md", "Good")
    (tmp_path / "bad.md").write_text("no front matter", encoding="utf-8")
    provider = FileCorpusProvider(tmp_path)
    prompts = provider.get_all_prompts()
    assert [p.name for p in prompts] == ["Good"]
    assert [path.name for path, _ in provider.skipped] == ["bad.md"]


def test_file_provider_missing_dir_raises(tmp_path: Path):
    with pytest.raises(CorpusLoadError, match="not found"):
        FileCorpusProvider(tmp_path / "missing").get_all_prompts()


def test_find_prompt_by_id_then_name():
    prompts = [
        Prompt(id="a.md", name="Code Review"),
        Prompt(id="b.md", name="a.md"),
    ]
    assert find_prompt(prompts, "a.md").id == "a.md"
    assert find_prompt(prompts, "code review").id == "a.md"
    assert find_prompt(prompts, "missing") is None


def test_file_provider_skips_wrongly_typed_fields(tmp_path: Path):
    _write(tmp_path, "good.md", "Good")
    (tmp_path / "bad.md").write_text("---\nname: Bad\nvariables: 3\n---\nbody", encoding="utf-8")
    provider = FileCorpusProvider(tmp_path)
    prompts = provider.get_all_prompts()
    assert [p.name for p in prompts] == ["Good"]
    assert [path.name for path, _ in provider.skipped] == ["bad.md"]
    assert "must be a list" in provider.skipped[0][1]
