"""Tests for prompter use."""

from __future__ import annotations

from typer.testing import CliRunner

from prompter.cli.main import app

runner = CliRunner()


def test_use_copies_rendered_prompt(lib_args, clipboard):
    result = runner.invoke(app, ["use", "code-review.md", "--var", "language=Go", *lib_args])
    assert result.exit_code == 0, result.output
    (board,) = clipboard.instances
    assert board.writes == ["Review this Go code. Focus on correctness."]
    assert board.pastes == 1
    assert "Copied and pasted" in result.output


def test_use_by_name_without_variables_copies_only(lib_args, clipboard):
    result = runner.invoke(app, ["use", "commit message", *lib_args])
    assert result.exit_code == 0, result.output
    (board,) = clipboard.instances
    assert board.writes == ["Write a commit message for the staged changes."]
    assert board.pastes == 0
    assert "Copied to clipboard" in result.output
    assert "is ready to use" in result.output


def test_no_paste_overrides_auto_paste(lib_args, clipboard):
    result = runner.invoke(app, ["use", "code-review.md", "-v", "language=Go", "--no-paste", *lib_args])
    assert result.exit_code == 0
    assert clipboard.instances[0].pastes == 0


def test_paste_flag_forces_paste(lib_args, clipboard):
    result = runner.invoke(app, ["use", "git/commit.md", "--paste", *lib_args])
    assert result.exit_code == 0
    assert clipboard.instances[0].pastes == 1


def test_missing_required_variable_exits_1(lib_args, clipboard):
    result = runner.invoke(app, ["use", "code-review.md", *lib_args])
    assert result.exit_code == 1
    assert "'language' is required" in result.output
    assert clipboard.instances == []


def test_bad_var_syntax_exits_1(lib_args, clipboard):
    result = runner.invoke(app, ["use", "code-review.md", "--var", "language", *lib_args])
    assert result.exit_code == 1
    assert "name=value" in result.output


def test_unknown_prompt_exits_1(lib_args, clipboard):
    result = runner.invoke(app, ["use", "nope", *lib_args])
    assert result.exit_code == 1
    assert "No prompt matches 'nope'" in result.output


def test_clipboard_failure_exits_1_but_records_usage(lib_args, clipboard):
    clipboard.fail = True
    result = runner.invoke(app, ["use", "git/commit.md", *lib_args])
    assert result.exit_code == 1
    assert "Failed to copy to clipboard" in result.output

    stats = runner.invoke(app, ["stats", *lib_args])
    assert "Commit Message" in stats.output


def test_ask_prompts_for_missing_variables(lib_args, clipboard):
    result = runner.invoke(app, ["use", "code-review.md", "--ask", *lib_args], input="Rust\n\n")
    assert result.exit_code == 0, result.output
    assert clipboard.instances[0].writes == ["Review this Rust code. Focus on correctness."]


def test_print_echoes_rendered_text(lib_args, clipboard):
    result = runner.invoke(app, ["use", "git/commit.md", "--print", *lib_args])
    assert "Write a commit message for the staged changes." in result.output


def test_undeclared_placeholder_warns(lib_args, clipboard, library):
    (library / "loose.md").write_text("---\nname: Loose\n---\nHello {{who}}", encoding="utf-8")
    result = runner.invoke(app, ["use", "loose.md", *lib_args])
    assert result.exit_code == 0
    assert "not a declared variable" in result.output
    assert clipboard.instances[0].writes == ["Hello {{who}}"]
