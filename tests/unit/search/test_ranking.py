"""Tests for the ranking engine."""

from __future__ import annotations

import pytest

from prompter.corpus.models import Prompt
from prompter.search.frecency import FrecencySnapshot
from prompter.search.fuzzy import FuzzyMatcher
from prompter.search.ranking import RankingConfig, RankingEngine


@pytest.fixture
def engine():
    return RankingEngine()


def _p(id: str, name: str, **kw) -> Prompt:
    return Prompt(id=id, name=name, **kw)


# ------------------------------------------------------------------
# Empty query: browse by frecency
# ------------------------------------------------------------------

def test_empty_query_returns_every_prompt_by_frecency(engine):
    prompts = [_p("a", "Alpha"), _p("b", "Beta"), _p("c", "Gamma")]
    snap = FrecencySnapshot({"c": 0.8, "a": 0.2})
    results = engine.rank("", prompts, snap)
    assert [r.prompt.id for r in results] == ["c", "a", "b"]
    assert results[0].frecency_score == 0.8
    assert results[0].matched_field is None
    assert results[0].highlights == ()


def test_empty_query_ties_break_on_name(engine):
    prompts = [_p("3", "Charlie"), _p("1", "alpha"), _p("2", "Bravo")]
    assert [r.prompt.name for r in engine.rank("  ", prompts)] == ["Bravo", "Charlie", "alpha"]


def test_identical_name_ties_break_on_id(engine):
    prompts = [_p("b.md", "Same"), _p("a.md", "Same")]
    assert [r.prompt.id for r in engine.rank("", prompts)] == ["a.md", "b.md"]


# ------------------------------------------------------------------
# Non-empty query
# ------------------------------------------------------------------

def test_only_matching_prompts_are_returned(engine, code_review, commit_message):
    results = engine.rank("review", [code_review, commit_message])
    assert [r.prompt.id for r in results] == [code_review.id]


def test_every_result_has_a_matching_field(engine, code_review, commit_message):
    matcher = FuzzyMatcher()
    prompts = [code_review, commit_message, _p("x", "Translate", content="decode this")]
    for result in engine.rank("cod", prompts):
        assert result.matched_field is not None
        assert matcher.match("cod", result.matched_text) is not None


def test_name_match_outranks_content_match(engine, code_review, commit_message):
    results = engine.rank("cod", [commit_message, code_review])
    assert results[0].prompt.id == code_review.id
    assert results[0].matched_field == "name"
    assert results[0].highlights == ((0, 3),)
    assert results[1].matched_field == "content"


def test_tag_match_highlights_the_tag(engine):
    prompt = _p("z", "Zeta", tags=("misc", "python"))
    (result,) = engine.rank("pyt", [prompt])
    assert result.matched_field == "tags"
    assert result.matched_text == "python"
    assert result.highlights == ((0, 3),)


def test_frecency_breaks_close_ties(engine):
    prompts = [_p("n", "Alpha Notes"), _p("p", "Alpha Plans")]
    assert [r.prompt.id for r in engine.rank("alpha", prompts)] == ["n", "p"]
    snap = FrecencySnapshot({"p": 0.5})
    assert [r.prompt.id for r in engine.rank("alpha", prompts, snap)] == ["p", "n"]


def test_frecency_cannot_lift_weak_match_over_strong(engine):
    strong = _p("d", "Deploy")
    weak = _p("w", "Notes", content="handle exceptions properly")
    snap = FrecencySnapshot({"w": 0.99})
    assert [r.prompt.id for r in engine.rank("dep", [weak, strong], snap)] == ["d", "w"]


def test_combined_score_formula(engine):
    prompt = _p("d", "Deploy")
    (plain,) = engine.rank("dep", [prompt])
    (boosted,) = engine.rank("dep", [prompt], {"d": 0.4})
    assert boosted.score == pytest.approx(plain.score + 0.15 * 0.4)
    assert boosted.fuzzy_score == plain.fuzzy_score


def test_output_independent_of_input_order(engine, code_review, commit_message):
    extra = _p("x", "Translate", content="decode this")
    forward = engine.rank("cod", [code_review, commit_message, extra])
    backward = engine.rank("cod", [extra, commit_message, code_review])
    assert [r.prompt.id for r in forward] == [r.prompt.id for r in backward]


def test_limit_truncates():
    prompts = [_p(str(i), f"Prompt {i}") for i in range(10)]
    assert len(RankingEngine(RankingConfig(limit=3)).rank("", prompts)) == 3
    assert len(RankingEngine(RankingConfig(limit=None)).rank("", prompts)) == 10


def test_no_match_returns_empty(engine, code_review):
    assert engine.rank("qqq", [code_review]) == []
