"""Prompter error taxonomy.

Propagation policy:
  - Adapters raise the typed errors below.
  - PasteOrchestrator converts ClipboardError / PasteError / UsageRecordError,
    and untyped faults at the same steps, into a PasteOutcome; nothing escapes
    a dispatch.
  - SelectionController converts faults raised elsewhere (transitions, corpus
    loads) into an error outcome or an empty corpus and returns to Browsing.
  - Template validation never raises: TemplateRenderer.validate() returns a
    field → message dict. The CLI raises ValidationError to carry
    that dict to its error printer.
"""

from __future__ import annotations


class PrompterError(Exception):
    """Base class for all Prompter errors."""


class CorpusLoadError(PrompterError):
    """The corpus provider could not produce a prompt list."""


class UsageRecordError(PrompterError):
    """Recording a use in the usage store failed (logged, never blocking)."""


class ClipboardError(PrompterError):
    """Writing the rendered text to the clipboard failed (terminal for a dispatch)."""


class PasteError(PrompterError):
    """The paste keystroke could not be injected.

    Not an error outcome: the clipboard still holds the text, so the dispatch
    reports "copied, paste uncertain".
    """


class ValidationError(PrompterError):
    """Variable values failed validation.

    Attributes:
        field_errors: Mapping of variable name → human-readable message.
    """

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = dict(field_errors)
        detail = "; ".join(f"{k}: {v}" for k, v in sorted(self.field_errors.items()))
        super().__init__(f"Invalid variable values ({detail})")
