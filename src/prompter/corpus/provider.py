"""Corpus providers: where the launcher gets its prompt snapshot from.

Contract: ``get_all_prompts() -> list[Prompt]``. Ordering is irrelevant
(the ranking engine reorders). A provider that cannot produce a list at all
raises CorpusLoadError; the controller then shows an empty result set and
surfaces the error once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from prompter.corpus.models import Prompt
from prompter.corpus.parser import PromptParseError, parse_prompt_file
from prompter.errors import CorpusLoadError

logger = logging.getLogger(__name__)

_PROMPT_GLOB = "*.md"


class CorpusProvider(Protocol):
    def get_all_prompts(self) -> list[Prompt]: ...


class StaticCorpusProvider:
    """Serves a fixed, in-memory list of prompts."""

    def __init__(self, prompts: Iterable[Prompt]) -> None:
        self._prompts = list(prompts)

    def get_all_prompts(self) -> list[Prompt]:
        return list(self._prompts)


class FileCorpusProvider:
    """Loads every ``*.md`` prompt file below a library directory.

    Unreadable or malformed files are skipped with a warning so one broken
    file never hides the rest of the library. The list of skipped files from
    the last load is kept in ``skipped``.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser()
        self.skipped: list[tuple[Path, str]] = []

    def get_all_prompts(self) -> list[Prompt]:
        """Parse the library.

        Raises:
            CorpusLoadError: If the library directory is missing or cannot be
                listed.
        """
        if not self.root.is_dir():
            raise CorpusLoadError(f"Prompt library not found: '{self.root}'")

        try:
            paths = sorted(p for p in self.root.rglob(_PROMPT_GLOB) if p.is_file())
        except OSError as exc:
            raise CorpusLoadError(f"Cannot read prompt library '{self.root}': {exc}") from exc

        prompts: list[Prompt] = []
        self.skipped = []
        for path in paths:
            if any(part.startswith(".") for part in path.relative_to(self.root).parts):
                continue
            try:
                prompts.append(parse_prompt_file(path, self.root))
            except (OSError, UnicodeDecodeError, PromptParseError, TypeError) as exc:
                logger.warning("Skipping prompt file %s: %s", path, exc)
                self.skipped.append((path, str(exc)))
        logger.debug("Loaded %d prompt(s) from %s", len(prompts), self.root)
        return prompts


def find_prompt(prompts: Iterable[Prompt], key: str) -> Prompt | None:
    """Look a prompt up by id, falling back to a case-insensitive name match."""
    by_name: Prompt | None = None
    for prompt in prompts:
        if prompt.id == key:
            return prompt
        if by_name is None and prompt.name.lower() == key.lower():
            by_name = prompt
    return by_name
