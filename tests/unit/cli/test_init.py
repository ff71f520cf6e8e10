"""Tests for prompter init and version."""

from __future__ import annotations

import stat
from pathlib import Path

import yaml
from typer.testing import CliRunner

from prompter.cli.main import app

runner = CliRunner()


def _init(tmp_path: Path, *extra: str):
    return runner.invoke(app, ["init", "--config", str(tmp_path / "home" / "config.yaml"), *extra])


def test_init_creates_config_library_and_db(tmp_path: Path):
    result = _init(tmp_path)
    assert result.exit_code == 0, result.output
    cfg_path = tmp_path / "home" / "config.yaml"
    assert cfg_path.exists()
    assert stat.S_IMODE(cfg_path.stat().st_mode) == 0o600
    data = yaml.safe_load(cfg_path.read_text())
    assert (Path(data["library"]["prompts_dir"]) / "code-review.md").exists()
    assert Path(data["library"]["db_path"]).exists()


def test_init_with_explicit_dirs(tmp_path: Path):
    result = _init(tmp_path, "--prompts-dir", str(tmp_path / "lib"), "--db", str(tmp_path / "u.db"))
    assert result.exit_code == 0, result.output
    assert (tmp_path / "lib" / "code-review.md").exists()
    assert (tmp_path / "u.db").exists()


def test_init_no_example(tmp_path: Path):
    result = _init(tmp_path, "--prompts-dir", str(tmp_path / "lib"), "--no-example")
    assert result.exit_code == 0
    assert list((tmp_path / "lib").iterdir()) == []


def test_init_is_idempotent(tmp_path: Path):
    _init(tmp_path, "--prompts-dir", str(tmp_path / "lib"))
    example = tmp_path / "lib" / "code-review.md"
    example.write_text("---\nname: Mine\n---\nedited", encoding="utf-8")
    result = _init(tmp_path, "--prompts-dir", str(tmp_path / "lib"))
    assert result.exit_code == 0
    assert "left untouched" in result.output
    assert "edited" in example.read_text()


def test_example_prompt_is_searchable(tmp_path: Path):
    _init(tmp_path, "--prompts-dir", str(tmp_path / "lib"), "--db", str(tmp_path / "u.db"))
    result = runner.invoke(
        app, ["search", "review", "--prompts-dir", str(tmp_path / "lib"), "--db", str(tmp_path / "u.db")]
    )
    assert result.exit_code == 0, result.output
    assert "Code Review" in result.output


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.startswith("prompter ")


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "prompter" in result.output
