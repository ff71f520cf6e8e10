"""Launcher core — selection state machine, templates, paste orchestration."""

from prompter.launcher.controller import SelectionController
from prompter.launcher.debounce import QueryCoalescer
from prompter.launcher.paste import (
    ClipboardAdapter,
    Notification,
    PasteConfig,
    PasteOrchestrator,
    PasteOutcome,
    classify,
)
from prompter.launcher.state import (
    Cancel,
    Confirm,
    Direction,
    DispatchSettled,
    Navigate,
    Phase,
    QueryChanged,
    ResultsReady,
    SelectionState,
    SubmitVariables,
    move_selection,
    transition,
)
from prompter.launcher.templates import RenderResult, TemplateRenderer

__all__ = [
    "Cancel",
    "ClipboardAdapter",
    "Confirm",
    "Direction",
    "DispatchSettled",
    "Navigate",
    "Notification",
    "PasteConfig",
    "PasteOrchestrator",
    "PasteOutcome",
    "Phase",
    "QueryChanged",
    "QueryCoalescer",
    "RenderResult",
    "ResultsReady",
    "SelectionController",
    "SelectionState",
    "SubmitVariables",
    "TemplateRenderer",
    "classify",
    "move_selection",
    "transition",
]
