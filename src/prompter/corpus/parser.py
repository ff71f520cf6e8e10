"""Prompt file parser.

A prompt file is Markdown with YAML front matter:

    ---
    name: Code Review
    description: Review a diff
    tags: [coding, review]
    variables:
      - name: language
        default: TypeScript
        required: true
    auto_paste: true
    ---
    Review this {{language}} code ...

The prompt id is the file path relative to the library root (POSIX
separators); the folder is the parent directory of that path ("" at the
root) unless the front matter sets ``folder`` explicitly. Everything after
the closing ``---`` is the template content, stripped.

All YAML reads use yaml.safe_load().
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from prompter.corpus.models import Prompt, VariableSpec


class PromptParseError(ValueError):
    """A prompt file is malformed."""


def parse_prompt_text(text: str, prompt_id: str, folder: str = "") -> Prompt:
    """Parse the contents of a prompt file.

    Args:
        text: Full file contents.
        prompt_id: Stable id to assign (relative path for file corpora).
        folder: Folder segment used when the front matter has none.

    Raises:
        PromptParseError: Missing/empty front matter, invalid YAML, a
            missing name, or ``tags``/``variables`` that are not lists.
    """
    front, body = _split_front_matter(text)
    try:
        data = yaml.safe_load(front)
    except yaml.YAMLError as exc:
        raise PromptParseError(f"{prompt_id}: invalid YAML front matter: {exc}") from exc
    if not isinstance(data, dict):
        raise PromptParseError(f"{prompt_id}: front matter must be a mapping")

    name = str(data.get("name") or "").strip()
    if not name:
        raise PromptParseError(f"{prompt_id}: 'name' is required")

    return Prompt(
        id=prompt_id,
        name=name,
        description=str(data.get("description") or ""),
        content=body,
        folder=str(data.get("folder") or folder),
        tags=_parse_tags(data.get("tags"), prompt_id),
        variables=tuple(
            _parse_variable(v, prompt_id) for v in _as_list(data.get("variables"), "variables", prompt_id)
        ),
        auto_paste=bool(data.get("auto_paste", False)),
        is_favorite=bool(data.get("is_favorite", False)),
        icon=str(data.get("icon") or "file-text"),
        color=str(data.get("color") or "#6B7280"),
        created_at=str(data.get("created_at") or ""),
        updated_at=str(data.get("updated_at") or ""),
    )


def parse_prompt_file(path: Path, root: Path) -> Prompt:
    """Parse *path*, deriving id and folder from its location under *root*.

    Raises:
        PromptParseError: If the file content is malformed.
        OSError: If the file cannot be read.
    """
    relative = path.relative_to(root)
    folder = relative.parent.as_posix() if relative.parent != Path(".") else ""
    prompt = parse_prompt_text(
        path.read_text(encoding="utf-8"), prompt_id=relative.as_posix(), folder=folder
    )
    return replace(prompt, source_path=str(path))


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _split_front_matter(text: str) -> tuple[str, str]:
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != "---":
        raise PromptParseError("missing front matter delimiters")
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            front = "\n".join(lines[1:i])
            if not front.strip():
                raise PromptParseError("empty front matter")
            return front, "\n".join(lines[i + 1 :]).strip()
    raise PromptParseError("missing front matter delimiters")


def _as_list(raw: Any, key: str, prompt_id: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise PromptParseError(f"{prompt_id}: '{key}' must be a list, got {type(raw).__name__}")
    return raw


def _parse_tags(raw: Any, prompt_id: str) -> tuple[str, ...]:
    if isinstance(raw, str):
        return (raw,) if raw.strip() else ()
    return tuple(str(t) for t in _as_list(raw, "tags", prompt_id))


def _parse_variable(raw: Any, prompt_id: str) -> VariableSpec:
    if isinstance(raw, str):
        return VariableSpec(name=raw)
    if not isinstance(raw, dict) or not raw.get("name"):
        raise PromptParseError(f"{prompt_id}: each variable needs a 'name'")
    regex = raw.get("validation_regex")
    return VariableSpec(
        name=str(raw["name"]),
        default="" if raw.get("default") is None else str(raw["default"]),
        required=bool(raw.get("required", False)),
        validation_regex=str(regex) if regex else None,
        description=raw.get("description"),
    )
