"""Prompter search pipeline — fuzzy matching, frecency, ranking."""

from prompter.search.frecency import (
    FrecencyConfig,
    FrecencySnapshot,
    FrecencyTracker,
    InMemoryUsageStore,
    UsageStore,
)
from prompter.search.fuzzy import FuzzyMatcher, MatchResult
from prompter.search.ranking import RankingConfig, RankingEngine, SearchResult

__all__ = [
    "FrecencyConfig",
    "FrecencySnapshot",
    "FrecencyTracker",
    "FuzzyMatcher",
    "InMemoryUsageStore",
    "MatchResult",
    "RankingConfig",
    "RankingEngine",
    "SearchResult",
    "UsageStore",
]
