"""Domain models for the prompt corpus."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class VariableSpec:
    name: str
    default: str = ""
    required: bool = False
    validation_regex: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Prompt:
    """A saved text template. Immutable snapshot owned by the corpus provider.

    Attributes:
        id: Stable opaque identifier (the file name for file-backed corpora).
        content: Template text with ``{{name}}`` placeholders.
        folder: Folder path segment the prompt lives in ("" at the root).
        variables: Declared variables, in display order.
        auto_paste: Inject Ctrl+V after copying when True.
    """

    id: str
    name: str
    content: str = ""
    description: str = ""
    folder: str = ""
    tags: tuple[str, ...] = ()
    variables: tuple[VariableSpec, ...] = ()
    auto_paste: bool = False
    is_favorite: bool = False
    icon: str = "file-text"
    color: str = "#6B7280"
    created_at: str = ""
    updated_at: str = ""
    source_path: str | None = field(default=None, compare=False)

    @property
    def has_variables(self) -> bool:
        return bool(self.variables)
