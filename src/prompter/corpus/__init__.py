"""Prompt corpus — models, file parser, providers."""

from prompter.corpus.models import Prompt, VariableSpec
from prompter.corpus.parser import PromptParseError, parse_prompt_file, parse_prompt_text
from prompter.corpus.provider import (
    CorpusProvider,
    FileCorpusProvider,
    StaticCorpusProvider,
    find_prompt,
)

__all__ = [
    "CorpusProvider",
    "FileCorpusProvider",
    "Prompt",
    "PromptParseError",
    "StaticCorpusProvider",
    "VariableSpec",
    "find_prompt",
    "parse_prompt_file",
    "parse_prompt_text",
]
