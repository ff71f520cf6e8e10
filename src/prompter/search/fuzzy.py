"""Fuzzy subsequence matcher for launcher search.

Every query character must appear, in order, somewhere in the candidate
(case-insensitive). Whitespace in the query is ignored, so "cod rev" and
"codrev" are the same query.

Scoring (higher = better):
  match         +16 per matched character
  boundary      +8  when the character starts a word: string start, after a
                    non-alphanumeric character, or a camelCase hump
  consecutive   +4  when the character directly follows the previous match
  gap           -3  to open a gap, -1 per further skipped character
  leading       -0.5 per character before the first match (capped at 10)
  length        -0.02 per candidate character (capped at 200)

The alignment is chosen by dynamic programming restricted to the window
between the leftmost forward match and the rightmost backward match of each
query character. Windows larger than _DP_CELL_LIMIT fall back to the leftmost
greedy alignment, scored with the same rules.

Usage:
    matcher = FuzzyMatcher()
    result = matcher.match("cod", "Code Review")
    result.highlights   # ((0, 3),)
"""

from __future__ import annotations

from dataclasses import dataclass

_SCORE_MATCH = 16.0
_BONUS_BOUNDARY = 8.0
_BONUS_CONSECUTIVE = 4.0
_PENALTY_GAP_START = 3.0
_PENALTY_GAP_EXTENSION = 1.0
_PENALTY_LEADING = 0.5
_LEADING_CAP = 10
_PENALTY_LENGTH = 0.02
_LENGTH_CAP = 200

_DP_CELL_LIMIT = 40_000

_NEG_INF = float("-inf")


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a successful match.

    Attributes:
        score: Raw score (see module docstring); 0.0 for an empty query.
        normalized: *score* mapped into [0, 1] against the best score a query
            of the same length can reach.
        highlights: Ordered, merged half-open ``(start, end)`` ranges into the
            candidate string.
    """

    score: float
    normalized: float = 0.0
    highlights: tuple[tuple[int, int], ...] = ()


class FuzzyMatcher:
    """Stateless subsequence matcher. Safe to share between threads."""

    def match(self, query: str, candidate: str) -> MatchResult | None:
        """Match *query* against *candidate*.

        Returns:
            MatchResult, or None when *query* is not a subsequence of
            *candidate*. An empty (or whitespace-only) query matches every
            candidate with a neutral score of 0 and no highlights.
        """
        needle = [ch.lower() for ch in query if not ch.isspace()]
        if not needle:
            return MatchResult(score=0.0, normalized=0.0, highlights=())

        # Per-character lower() keeps indices aligned with *candidate*.
        hay = [ch.lower() for ch in candidate]
        if len(needle) > len(hay):
            return None

        window = _match_window(needle, hay)
        if window is None:
            return None
        first, last = window

        cells = sum(hi - lo + 1 for lo, hi in zip(first, last))
        if cells > _DP_CELL_LIMIT:
            positions = first
            raw = _score_positions(positions, candidate)
        else:
            raw, positions = _best_alignment(needle, hay, candidate, first, last)

        raw -= _PENALTY_LENGTH * min(len(candidate), _LENGTH_CAP)
        best = max_score(len(needle))
        normalized = min(1.0, max(0.0, raw / best)) if best > 0 else 0.0
        return MatchResult(
            score=raw,
            normalized=normalized,
            highlights=_merge_ranges(positions),
        )


def max_score(query_length: int) -> float:
    """Best raw score reachable by a query of *query_length* characters.

    A contiguous match starting the candidate: one boundary bonus, then a
    consecutive bonus for every following character.
    """
    if query_length <= 0:
        return 0.0
    return (
        query_length * _SCORE_MATCH
        + _BONUS_BOUNDARY
        + (query_length - 1) * _BONUS_CONSECUTIVE
    )


# ------------------------------------------------------------------
# Alignment
# ------------------------------------------------------------------


def _match_window(
    needle: list[str], hay: list[str]
) -> tuple[list[int], list[int]] | None:
    """Return (leftmost, rightmost) feasible positions per query character."""
    first: list[int] = []
    j = 0
    m = len(hay)
    for ch in needle:
        while j < m and hay[j] != ch:
            j += 1
        if j == m:
            return None
        first.append(j)
        j += 1

    last = [0] * len(needle)
    j = m - 1
    for i in range(len(needle) - 1, -1, -1):
        while hay[j] != needle[i]:
            j -= 1
        last[i] = j
        j -= 1
    return first, last


def _best_alignment(
    needle: list[str],
    hay: list[str],
    candidate: str,
    first: list[int],
    last: list[int],
) -> tuple[float, list[int]]:
    """Affine-gap DP over the match window. Returns (score, positions)."""
    n = len(needle)
    prev: dict[int, float] = {}
    back: list[dict[int, int]] = []

    for i in range(n):
        row: dict[int, float] = {}
        ptr: dict[int, int] = {}
        lo, hi = first[i], last[i]

        if i == 0:
            for j in range(lo, hi + 1):
                if hay[j] != needle[0]:
                    continue
                row[j] = (
                    _SCORE_MATCH
                    + _bonus(candidate, j)
                    - _PENALTY_LEADING * min(j, _LEADING_CAP)
                )
                ptr[j] = -1
        else:
            # gap_best = max over k <= j-2 of prev[k] - gap_penalty(j - k - 1)
            gap_best, gap_from = _NEG_INF, -1
            for j in range(first[i - 1] + 1, hi + 1):
                gap_best -= _PENALTY_GAP_EXTENSION
                k = j - 2
                if k in prev and prev[k] - _PENALTY_GAP_START > gap_best:
                    gap_best, gap_from = prev[k] - _PENALTY_GAP_START, k
                if j < lo or hay[j] != needle[i]:
                    continue

                diag = prev.get(j - 1, _NEG_INF)
                if diag > _NEG_INF:
                    diag += _BONUS_CONSECUTIVE
                if diag == _NEG_INF and gap_best == _NEG_INF:
                    continue
                if diag >= gap_best:
                    best, source = diag, j - 1
                else:
                    best, source = gap_best, gap_from
                row[j] = best + _SCORE_MATCH + _bonus(candidate, j)
                ptr[j] = source

        prev = row
        back.append(ptr)

    # Earliest end wins ties.
    end = min(prev, key=lambda j: (-prev[j], j))
    positions = [end]
    for i in range(n - 1, 0, -1):
        positions.append(back[i][positions[-1]])
    positions.reverse()
    return prev[end], positions


def _score_positions(positions: list[int], candidate: str) -> float:
    score = 0.0
    for idx, j in enumerate(positions):
        score += _SCORE_MATCH + _bonus(candidate, j)
        if idx == 0:
            score -= _PENALTY_LEADING * min(j, _LEADING_CAP)
            continue
        gap = j - positions[idx - 1] - 1
        if gap == 0:
            score += _BONUS_CONSECUTIVE
        else:
            score -= _PENALTY_GAP_START + _PENALTY_GAP_EXTENSION * (gap - 1)
    return score


def _bonus(candidate: str, j: int) -> float:
    if j == 0:
        return _BONUS_BOUNDARY
    before, ch = candidate[j - 1], candidate[j]
    if not before.isalnum():
        return _BONUS_BOUNDARY
    if before.islower() and ch.isupper():
        return _BONUS_BOUNDARY
    return 0.0


def _merge_ranges(positions: list[int]) -> tuple[tuple[int, int], ...]:
    ranges: list[tuple[int, int]] = []
    for j in positions:
        if ranges and ranges[-1][1] == j:
            ranges[-1] = (ranges[-1][0], j + 1)
        else:
            ranges.append((j, j + 1))
    return tuple(ranges)
