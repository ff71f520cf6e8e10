"""SelectionController: owns the launcher state and runs its effects.

The controller is the only stateful piece of the launcher. It feeds events
through the pure transition function and executes the resulting effects:

    ScheduleRank  → QueryCoalescer.push()        (ranked later by tick())
    Dispatch      → PasteOrchestrator.dispatch() → DispatchSettled event
    Dismiss       → ``dismissed`` flag for the window layer

Threading: transitions are serialised by a lock, which is released while a
dispatch runs, so a key-listener thread keeps delivering events. A Confirm
arriving during that time hits the DISPATCHING phase and is ignored.

Faults: nothing raised inside a transition or a dispatch escapes handle().
The state returns to BROWSING with a generic error outcome and an error
notification instead.

Usage:
    controller = SelectionController(corpus, tracker, ranker, orchestrator)
    controller.open()
    controller.handle(QueryChanged("cod"))
    controller.tick()              # called by the UI loop at its own cadence
    controller.handle(Confirm())
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import replace

from prompter.corpus.models import Prompt
from prompter.corpus.provider import CorpusProvider
from prompter.errors import CorpusLoadError
from prompter.launcher.debounce import QueryCoalescer
from prompter.launcher.paste import (
    Notification,
    PasteOrchestrator,
    PasteOutcome,
    classify,
    error_outcome,
)
from prompter.launcher.state import (
    Confirm,
    Dismiss,
    Dispatch,
    DispatchSettled,
    Event,
    Phase,
    ResultsReady,
    ScheduleRank,
    SelectionState,
    Step,
    transition,
)
from prompter.launcher.templates import TemplateRenderer
from prompter.search.frecency import FrecencyTracker
from prompter.search.ranking import RankingEngine

logger = logging.getLogger(__name__)

NotificationSink = Callable[[Notification], None]


class SelectionController:
    """Drives one launcher instance from appearance to dismissal."""

    def __init__(
        self,
        corpus: CorpusProvider,
        tracker: FrecencyTracker,
        ranker: RankingEngine,
        orchestrator: PasteOrchestrator,
        *,
        renderer: TemplateRenderer | None = None,
        coalescer: QueryCoalescer | None = None,
        notify: NotificationSink | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._corpus = corpus
        self._tracker = tracker
        self._ranker = ranker
        self._orchestrator = orchestrator
        self._renderer = renderer or TemplateRenderer()
        self._coalescer = coalescer or QueryCoalescer()
        self._notify = notify
        self._clock = clock

        self._lock = threading.RLock()
        self._state = SelectionState()
        self._prompts: list[Prompt] = []
        self.corpus_error: CorpusLoadError | None = None
        self.dismissed = False

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def prompts(self) -> list[Prompt]:
        return list(self._prompts)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> SelectionState:
        """Load the corpus and show the browse list (empty query, no debounce)."""
        self.dismissed = False
        self.reload_corpus()
        self._rank_now(self._state.query)
        return self._state

    def reload_corpus(self) -> None:
        """Refresh the corpus snapshot. Load errors leave an empty corpus.

        The same error is surfaced only once; a later successful load clears it.
        """
        try:
            prompts = self._corpus.get_all_prompts()
        except Exception as raised:
            if isinstance(raised, CorpusLoadError):
                exc = raised
                logger.error("Corpus load failed: %s", exc)
            else:
                logger.exception("Unexpected error loading corpus")
                exc = CorpusLoadError(f"Unexpected error loading prompts: {raised}")
            first_time = self.corpus_error is None or str(self.corpus_error) != str(exc)
            self.corpus_error = exc
            self._prompts = []
            if first_time:
                self._emit(Notification(kind="error", title="Could not load prompts", detail=str(exc)))
            return
        self.corpus_error = None
        self._prompts = list(prompts)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def handle(self, event: Event) -> SelectionState:
        """Apply *event* and run its effect. Never raises.

        A Confirm while browsing first ranks any query still waiting in the
        coalescer, so the selection always belongs to the text on screen.
        """
        if isinstance(event, Confirm) and self._state.phase is Phase.BROWSING:
            self.flush()
        with self._lock:
            step = self._safe_transition(event)
            self._state = step.state
            effect = step.effect

        if isinstance(effect, ScheduleRank):
            self._coalescer.push(effect.query, self._clock())
        elif isinstance(effect, Dispatch):
            self._run_dispatch(effect)
        elif isinstance(effect, Dismiss):
            self.dismissed = True
        return self._state

    def tick(self, now: float | None = None) -> bool:
        """Rank the pending query if it has settled. Returns True if ranking ran."""
        query = self._coalescer.poll(self._clock() if now is None else now)
        if query is None:
            return False
        self._rank_now(query)
        return True

    def flush(self) -> bool:
        """Rank the pending query immediately (e.g. Enter pressed mid-debounce)."""
        query = self._coalescer.flush()
        if query is None:
            return False
        self._rank_now(query)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rank_now(self, query: str) -> None:
        try:
            results = self._ranker.rank(query, self._prompts, self._tracker.snapshot())
        except Exception:
            logger.exception("Ranking failed for %r", query)
            results = []
        self.handle(ResultsReady(query=query, results=tuple(results)))

    def _safe_transition(self, event: Event) -> Step:
        try:
            return transition(self._state, event, self._renderer)
        except Exception as exc:
            logger.exception("Transition failed on %s", type(event).__name__)
            outcome = error_outcome(f"Unexpected error: {exc}")
            self._emit(Notification(kind="error", title="Something went wrong", detail=str(exc)))
            return Step(
                replace(
                    self._state,
                    phase=Phase.BROWSING,
                    pending=None,
                    values={},
                    field_errors={},
                    last_outcome=outcome,
                )
            )

    def _run_dispatch(self, effect: Dispatch) -> None:
        try:
            outcome = self._orchestrator.dispatch(effect.prompt, effect.rendered)
            notification = classify(outcome, effect.prompt.name)
        except Exception as exc:
            logger.exception("Dispatch failed for %s", effect.prompt.id)
            outcome = error_outcome(f"Failed to paste: {exc}")
            notification = Notification(kind="error", title="Failed to paste", detail=str(exc))
        self.handle(DispatchSettled(outcome))
        self._emit(notification)

    def _emit(self, notification: Notification) -> None:
        if self._notify is None:
            return
        try:
            self._notify(notification)
        except Exception:
            logger.exception("Notification sink failed")

    @property
    def last_outcome(self) -> PasteOutcome | None:
        return self._state.last_outcome
