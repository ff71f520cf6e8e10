"""Launcher selection state machine as a pure transition function.

    transition(state, event, renderer) -> Step(state, effect)

No I/O happens here. Work that must leave the function (re-ranking,
dispatching, closing the launcher) is returned as an *effect* for the
controller to execute; its result comes back in as another event.

Phases and transitions:

    BROWSING              QueryChanged      → BROWSING  + ScheduleRank
                          ResultsReady      → BROWSING  (stale queries dropped)
                          Navigate          → BROWSING  (wraparound)
                          Confirm, vars     → COLLECTING_VARIABLES
                          Confirm, no vars  → DISPATCHING + Dispatch
                          Cancel            → BROWSING  + Dismiss
    COLLECTING_VARIABLES  SubmitVariables   → DISPATCHING + Dispatch  (valid)
                                            → COLLECTING_VARIABLES    (field errors)
                          Cancel            → BROWSING  (no side effects)
    DISPATCHING           DispatchSettled   → BROWSING  (outcome kept)
                          QueryChanged      → DISPATCHING + ScheduleRank
                          anything else     → ignored (no second dispatch)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from prompter.corpus.models import Prompt
from prompter.launcher.paste import PasteOutcome
from prompter.launcher.templates import TemplateRenderer
from prompter.search.ranking import SearchResult


class Phase(str, Enum):
    BROWSING = "browsing"
    COLLECTING_VARIABLES = "collecting_variables"
    DISPATCHING = "dispatching"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


# ---------------------------------------------------------------------------
# Events (input boundary)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QueryChanged:
    text: str


@dataclass(frozen=True)
class Navigate:
    direction: Direction


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class SubmitVariables:
    values: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResultsReady:
    """Ranking finished for *query* (emitted by the controller, not by keys)."""

    query: str
    results: tuple[SearchResult, ...]


@dataclass(frozen=True)
class DispatchSettled:
    outcome: PasteOutcome


Event = Union[QueryChanged, Navigate, Confirm, Cancel, SubmitVariables, ResultsReady, DispatchSettled]


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScheduleRank:
    query: str


@dataclass(frozen=True)
class Dispatch:
    prompt: Prompt
    rendered: str


@dataclass(frozen=True)
class Dismiss:
    pass


Effect = Union[ScheduleRank, Dispatch, Dismiss]


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectionState:
    """Launcher state. Replaced, never mutated.

    Attributes:
        query: Current query text (may be ahead of *results*).
        results: Ranked results currently shown.
        ranked_query: Query that produced *results*.
        selected_index: Index into *results*; None when *results* is empty.
        pending: Prompt being collected or dispatched.
        values: Draft variable values while collecting.
        field_errors: Variable name → message from the last submit.
        last_outcome: Outcome of the most recent dispatch.
    """

    query: str = ""
    results: tuple[SearchResult, ...] = ()
    ranked_query: str | None = None
    selected_index: int | None = None
    phase: Phase = Phase.BROWSING
    pending: Prompt | None = None
    values: dict[str, str] = field(default_factory=dict)
    field_errors: dict[str, str] = field(default_factory=dict)
    last_outcome: PasteOutcome | None = None

    @property
    def selected(self) -> SearchResult | None:
        if self.selected_index is None:
            return None
        return self.results[self.selected_index]


@dataclass(frozen=True)
class Step:
    state: SelectionState
    effect: Effect | None = None


def move_selection(index: int, direction: Direction | str, max_index: int) -> int:
    """Move *index* one step in *direction* over [0, max_index], wrapping at both ends.

    A negative *max_index* (empty list) leaves *index* unchanged.
    """
    if max_index < 0:
        return index
    if Direction(direction) is Direction.UP:
        return index - 1 if index > 0 else max_index
    return index + 1 if index < max_index else 0


def transition(
    state: SelectionState, event: Event, renderer: TemplateRenderer | None = None
) -> Step:
    """Apply *event* to *state* and return the next state plus an optional effect."""
    renderer = renderer or TemplateRenderer()

    if isinstance(event, ResultsReady):
        return Step(_apply_results(state, event))

    if state.phase is Phase.BROWSING:
        return _browsing(state, event, renderer)
    if state.phase is Phase.COLLECTING_VARIABLES:
        return _collecting(state, event, renderer)
    return _dispatching(state, event)


# ---------------------------------------------------------------------------
# Per-phase handlers
# ---------------------------------------------------------------------------


def _browsing(state: SelectionState, event: Event, renderer: TemplateRenderer) -> Step:
    if isinstance(event, QueryChanged):
        return Step(replace(state, query=event.text), ScheduleRank(event.text))

    if isinstance(event, Navigate):
        if state.selected_index is None:
            return Step(state)
        index = move_selection(state.selected_index, event.direction, len(state.results) - 1)
        return Step(replace(state, selected_index=index))

    if isinstance(event, Confirm):
        chosen = state.selected
        if chosen is None:
            return Step(state)
        prompt = chosen.prompt
        if prompt.has_variables:
            return Step(
                replace(
                    state,
                    phase=Phase.COLLECTING_VARIABLES,
                    pending=prompt,
                    values={v.name: v.default for v in prompt.variables},
                    field_errors={},
                )
            )
        rendered = renderer.substitute(prompt.content, {})
        return Step(
            replace(state, phase=Phase.DISPATCHING, pending=prompt),
            Dispatch(prompt, rendered),
        )

    if isinstance(event, Cancel):
        return Step(state, Dismiss())

    return Step(state)


def _collecting(state: SelectionState, event: Event, renderer: TemplateRenderer) -> Step:
    if isinstance(event, Cancel):
        return Step(_back_to_browsing(state))

    if isinstance(event, SubmitVariables) and state.pending is not None:
        result = renderer.render(state.pending, event.values)
        if not result.ok or result.text is None:
            return Step(
                replace(state, values=dict(event.values), field_errors=result.errors)
            )
        return Step(
            replace(state, phase=Phase.DISPATCHING, values=result.values, field_errors={}),
            Dispatch(state.pending, result.text),
        )

    return Step(state)


def _dispatching(state: SelectionState, event: Event) -> Step:
    if isinstance(event, DispatchSettled):
        return Step(replace(_back_to_browsing(state), last_outcome=event.outcome))
    if isinstance(event, QueryChanged):
        return Step(replace(state, query=event.text), ScheduleRank(event.text))
    return Step(state)


def _back_to_browsing(state: SelectionState) -> SelectionState:
    return replace(
        state, phase=Phase.BROWSING, pending=None, values={}, field_errors={}
    )


def _apply_results(state: SelectionState, event: ResultsReady) -> SelectionState:
    """Install fresh results for the current query; drop stale ones.

    Re-ranking the same query (e.g. after a corpus reload) keeps the selection
    on the same prompt when it is still listed, else clamps the index. A new
    query selects the top result.
    """
    if event.query != state.query:
        return state

    results = tuple(event.results)
    if not results:
        index = None
    elif event.query == state.ranked_query and state.selected is not None:
        previous_id = state.selected.prompt.id
        index = next(
            (i for i, r in enumerate(results) if r.prompt.id == previous_id),
            min(state.selected_index or 0, len(results) - 1),
        )
    else:
        index = 0
    return replace(state, results=results, ranked_query=event.query, selected_index=index)
