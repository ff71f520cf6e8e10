"""Tests for the prompt file parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from prompter.corpus.models import VariableSpec
from prompter.corpus.parser import PromptParseError, parse_prompt_file, parse_prompt_text

_FULL = """\
---
name: Code Review
description: Review a diff
tags: [coding, review]
variables:
  - name: language
    default: TypeScript
    required: true
    validation_regex: "[A-Za-z+#]+"
    description: Language of the diff
  - focus
auto_paste: true
is_favorite: true
---
Review this {{language}} code.

Focus on {{focus}}.
"""


def test_parse_full_front_matter():
    prompt = parse_prompt_text(_FULL, prompt_id="coding/review.md", folder="coding")
    assert prompt.id == "coding/review.md"
    assert prompt.name == "Code Review"
    assert prompt.description == "Review a diff"
    assert prompt.folder == "coding"
    assert prompt.tags == ("coding", "review")
    assert prompt.auto_paste is True
    assert prompt.is_favorite is True
    assert prompt.content == "Review this {{language}} code.\n\nFocus on {{focus}}."


def test_parse_variables():
    prompt = parse_prompt_text(_FULL, prompt_id="x.md")
    language, focus = prompt.variables
    assert language == VariableSpec(
        name="language",
        default="TypeScript",
        required=True,
        validation_regex="[A-Za-z+#]+",
        description="Language of the diff",
    )
    assert focus == VariableSpec(name="focus")
    assert prompt.has_variables


def test_minimal_prompt_uses_defaults():
    prompt = parse_prompt_text("---\nname: Hello\n---\nHi there\n", prompt_id="hello.md")
    assert prompt.tags == ()
    assert prompt.variables == ()
    assert prompt.auto_paste is False
    assert prompt.icon == "file-text"
    assert prompt.color == "#6B7280"
    assert not prompt.has_variables


def test_front_matter_folder_wins():
    text = "---\nname: A\nfolder: custom\n---\nbody"
    assert parse_prompt_text(text, prompt_id="a.md", folder="disk").folder == "custom"


def test_null_default_becomes_empty_string():
    text = "---\nname: A\nvariables:\n  - name: x\n    default:\n---\n{{x}}"
    assert parse_prompt_text(text, prompt_id="a.md").variables[0].default == ""


def test_byte_order_mark_is_ignored():
    prompt = parse_prompt_text("\ufeff---\nname: A\n---\nbody", prompt_id="a.md")
    assert prompt.name == "A"


@pytest.mark.parametrize(
    "text",
    [
        "no front matter at all",
        "---\nname: A\nbody without closing",
        "---\n---\nbody",
        "---\n- a list\n---\nbody",
        "---\nname: [unclosed\n---\nbody",
        "---\ndescription: no name\n---\nbody",
        "---\nname: A\nvariables:\n  - default: x\n---\nbody",
    ],
)
def test_malformed_files_raise(text):
    with pytest.raises(PromptParseError):
        parse_prompt_text(text, prompt_id="bad.md")


def test_parse_prompt_file_derives_id_and_folder(tmp_path: Path):
    target = tmp_path / "coding" / "python" / "review.md"
    target.parent.mkdir(parents=True)
    target.write_text("---\nname: Review\n---\nbody", encoding="utf-8")

    prompt = parse_prompt_file(target, tmp_path)
    assert prompt.id == "coding/python/review.md"
    assert prompt.folder == "coding/python"
    assert prompt.source_path == str(target)


def test_parse_prompt_file_at_root_has_empty_folder(tmp_path: Path):
    target = tmp_path / "top.md"
    target.write_text("---\nname: Top\n---\nbody", encoding="utf-8")
    assert parse_prompt_file(target, tmp_path).folder == ""


@pytest.mark.parametrize(
    "text",
    [
        "---\nname: A\ntags: 5\n---\nbody",
        "---\nname: A\ntags: {a: 1}\n---\nbody",
        "---\nname: A\nvariables: 3\n---\nbody",
        "---\nname: A\nvariables: language\n---\nbody",
    ],
)
def test_wrongly_typed_list_fields_raise(text):
    with pytest.raises(PromptParseError, match="must be a list"):
        parse_prompt_text(text, prompt_id="bad.md")


def test_bare_string_tag_is_one_tag():
    prompt = parse_prompt_text("---\nname: A\ntags: coding\n---\nbody", prompt_id="a.md")
    assert prompt.tags == ("coding",)
