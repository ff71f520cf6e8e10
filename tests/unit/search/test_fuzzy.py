"""Tests for the fuzzy subsequence matcher."""

from __future__ import annotations

import pytest

from prompter.search.fuzzy import FuzzyMatcher, max_score


@pytest.fixture
def matcher():
    return FuzzyMatcher()


def test_prefix_match_highlights_leading_characters(matcher):
    result = matcher.match("cod", "Code Review")
    assert result is not None
    assert result.highlights == ((0, 3),)
    assert result.score == pytest.approx(max_score(3) - 11 * 0.02)


def test_non_subsequence_returns_none(matcher):
    assert matcher.match("xyz", "Code Review") is None
    assert matcher.match("vc", "Code Review") is None  # order matters


def test_query_longer_than_candidate_returns_none(matcher):
    assert matcher.match("codes", "Code") is None


def test_case_insensitive(matcher):
    assert matcher.match("CODE", "code review").highlights == ((0, 4),)


def test_empty_query_matches_with_neutral_score(matcher):
    result = matcher.match("", "anything")
    assert result is not None
    assert result.score == 0.0
    assert result.highlights == ()
    assert matcher.match("   ", "anything").highlights == ()


def test_whitespace_in_query_is_ignored(matcher):
    result = matcher.match("cod rev", "Code Review")
    assert result.highlights == ((0, 3), (5, 8))
    assert matcher.match("codrev", "Code Review").score == result.score


def test_word_start_beats_mid_word(matcher):
    assert matcher.match("cod", "Code").score > matcher.match("cod", "decode").score


def test_contiguous_beats_scattered(matcher):
    assert matcher.match("rev", "review").score > matcher.match("rev", "rxexv").score


def test_alignment_prefers_tight_cluster_over_leftmost(matcher):
    # Greedy would take the leading 'a' and open a long gap.
    result = matcher.match("ab", "axxxxxxab")
    assert result.highlights == ((7, 9),)


def test_camel_case_hump_is_a_boundary(matcher):
    result = matcher.match("gc", "getConfig")
    assert result.highlights == ((0, 1), (3, 4))


def test_normalized_is_bounded(matcher):
    for query, candidate in [("cod", "Code Review"), ("ab", "axxxxxxab"), ("z", "a" * 300 + "z")]:
        result = matcher.match(query, candidate)
        assert 0.0 <= result.normalized <= 1.0


def test_large_window_falls_back_to_greedy(matcher):
    result = matcher.match("a" * 200, "a" * 500)
    assert result is not None
    assert result.highlights == ((0, 200),)
    assert result.normalized < 1.0


def test_highlights_index_into_original_candidate(matcher):
    candidate = "Straße Prompt"
    result = matcher.match("pr", candidate)
    start, end = result.highlights[0]
    assert candidate[start:end] == "Pr"


def test_max_score():
    assert max_score(0) == 0.0
    assert max_score(1) == 16 + 8
    assert max_score(3) == 3 * 16 + 8 + 2 * 4
