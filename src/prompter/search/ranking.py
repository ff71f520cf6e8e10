"""Ranking engine: fuzzy relevance + frecency, fused into one ordered list.

For each prompt the fields are tried in priority order

    name → tags (each tag) → description → content

The first matching field supplies the highlight ranges; the best weighted
field score (``normalized × field weight``) is the fuzzy term.

    combined = fuzzy_weight · fuzzy + frecency_weight · frecency

Non-empty query: fuzzy_weight = 1.0, frecency_weight = 0.15. Frecency is
bounded in [0, 1), so it can reorder close matches but never lifts a weak
match over a strong one by more than 0.15.
Empty query:     every prompt is returned, ordered by frecency alone.

Ties break on name, then id, so output is a pure function of
(query, corpus snapshot, frecency snapshot).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from prompter.corpus.models import Prompt
from prompter.search.fuzzy import FuzzyMatcher, MatchResult

logger = logging.getLogger(__name__)

# Score rounding before sorting so float noise never decides an ordering.
_SCORE_PRECISION = 9

_DEFAULT_FIELD_WEIGHTS: dict[str, float] = {
    "name": 1.0,
    "tags": 0.9,
    "description": 0.75,
    "content": 0.6,
}


@dataclass
class RankingConfig:
    """Configuration for the ranking engine.

    Attributes:
        fuzzy_weight: Weight of the fuzzy term for non-empty queries.
        frecency_weight: Weight of the frecency term for non-empty queries.
        field_weights: Multiplier per searched field.
        limit: Maximum number of results (None = unlimited).
    """

    fuzzy_weight: float = 1.0
    frecency_weight: float = 0.15
    field_weights: dict[str, float] = field(default_factory=lambda: dict(_DEFAULT_FIELD_WEIGHTS))
    limit: int | None = 50


@dataclass
class SearchResult:
    """A ranked prompt together with its scores and highlight ranges.

    Attributes:
        prompt: The matched Prompt.
        score: Combined ranking score (higher = better).
        fuzzy_score: Best weighted, normalized field score (0.0 for empty query).
        frecency_score: Frecency snapshot value used for this ranking.
        matched_field: Field that supplied the highlights, or None for an
            empty query.
        matched_text: The string the highlight ranges index into (for tags,
            the individual tag).
        highlights: Ordered half-open (start, end) ranges in *matched_text*.
    """

    prompt: Prompt
    score: float
    fuzzy_score: float = 0.0
    frecency_score: float = 0.0
    matched_field: str | None = None
    matched_text: str = ""
    highlights: tuple[tuple[int, int], ...] = ()


class RankingEngine:
    """Stateless ranker. One instance may serve any number of launchers."""

    def __init__(
        self,
        config: RankingConfig | None = None,
        matcher: FuzzyMatcher | None = None,
    ) -> None:
        self.config = config or RankingConfig()
        self._matcher = matcher or FuzzyMatcher()

    def rank(
        self,
        query: str,
        prompts: Iterable[Prompt],
        frecency: Mapping[str, float] | None = None,
    ) -> list[SearchResult]:
        """Return prompts matching *query*, best first.

        Args:
            query: Raw query text. Whitespace-only counts as empty.
            prompts: Corpus snapshot; input order is irrelevant.
            frecency: Prompt id → frecency score snapshot (missing ids = 0.0).

        Returns:
            Ordered SearchResult list, truncated to ``config.limit``.
        """
        scores = frecency or {}
        browse = not query.strip()

        results: list[SearchResult] = []
        for prompt in prompts:
            recency = float(scores.get(prompt.id, 0.0))
            if browse:
                results.append(
                    SearchResult(prompt=prompt, score=recency, frecency_score=recency)
                )
                continue

            matched = self._match_prompt(query, prompt)
            if matched is None:
                continue
            fuzzy, field_name, text, match = matched
            combined = self.config.fuzzy_weight * fuzzy + self.config.frecency_weight * recency
            results.append(
                SearchResult(
                    prompt=prompt,
                    score=combined,
                    fuzzy_score=fuzzy,
                    frecency_score=recency,
                    matched_field=field_name,
                    matched_text=text,
                    highlights=match.highlights,
                )
            )

        results.sort(
            key=lambda r: (-round(r.score, _SCORE_PRECISION), r.prompt.name, r.prompt.id)
        )
        if self.config.limit is not None:
            results = results[: self.config.limit]
        logger.debug("rank(%r): %d result(s)", query, len(results))
        return results

    # ------------------------------------------------------------------
    # Field matching
    # ------------------------------------------------------------------

    def _match_prompt(
        self, query: str, prompt: Prompt
    ) -> tuple[float, str, str, MatchResult] | None:
        """Return (best weighted score, highlight field, highlight text, highlight match)."""
        best = 0.0
        highlight: tuple[str, str, MatchResult] | None = None

        for field_name, text in _searchable_fields(prompt):
            match = self._matcher.match(query, text)
            if match is None:
                continue
            weighted = match.normalized * self.config.field_weights.get(field_name, 1.0)
            if highlight is None:
                highlight = (field_name, text, match)
                best = weighted
            else:
                best = max(best, weighted)

        if highlight is None:
            return None
        return (best, *highlight)


def _searchable_fields(prompt: Prompt) -> Iterable[tuple[str, str]]:
    yield "name", prompt.name
    for tag in prompt.tags:
        yield "tags", tag
    if prompt.description:
        yield "description", prompt.description
    if prompt.content:
        yield "content", prompt.content
