"""Copy/paste orchestration with an honest four-field outcome.

Sequence for one dispatch:

    1. record usage            failure → logged, dispatch continues
    2. write clipboard         failure → terminal: paste skipped, error outcome
    3. settle delay (20 ms)
    4. read-back verification  optional; mismatch lowers paste confidence only
    5. paste delay (100 ms) + trigger paste    only when the prompt has auto_paste
                               failure → "copied, paste uncertain"

Usage is recorded before the clipboard write, so a selection counts toward
frecency even when the copy fails.

pasteLikelySuccess is a heuristic: no error was reported and the clipboard
read back as written. Whether the target application actually received the
text can never be confirmed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from prompter.corpus.models import Prompt
from prompter.errors import ClipboardError, PasteError, UsageRecordError

logger = logging.getLogger(__name__)

MSG_COPIED = "Copied to clipboard"
MSG_PASTED = "Copied and pasted"
MSG_PASTE_UNCERTAIN = "Copied to clipboard - press Ctrl+V if not pasted"


class ClipboardAdapter(Protocol):
    """OS clipboard + keystroke injection contract."""

    def write_clipboard(self, text: str) -> None:
        """Put *text* on the clipboard. Raises ClipboardError on failure."""

    def trigger_paste(self) -> None:
        """Send the paste shortcut to the focused window. Raises PasteError."""


@runtime_checkable
class ReadableClipboard(Protocol):
    def read_clipboard(self) -> str: ...


class UsageRecorder(Protocol):
    def record_use(self, prompt_id: str) -> object: ...


@dataclass(frozen=True)
class PasteOutcome:
    clipboard_success: bool
    paste_attempted: bool
    paste_likely_success: bool
    message: str


@dataclass(frozen=True)
class Notification:
    """Classified outcome for an external notification renderer.

    Attributes:
        kind: 'success', 'partial' or 'error'.
    """

    kind: str
    title: str
    detail: str


@dataclass
class PasteConfig:
    clipboard_settle_ms: int = 20
    paste_delay_ms: int = 100
    verify_clipboard: bool = True


class PasteOrchestrator:
    """Sequences usage recording, clipboard write and paste trigger."""

    def __init__(
        self,
        recorder: UsageRecorder,
        clipboard: ClipboardAdapter,
        config: PasteConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._recorder = recorder
        self._clipboard = clipboard
        self._config = config or PasteConfig()
        self._sleep = sleep

    def dispatch(self, prompt: Prompt, rendered: str) -> PasteOutcome:
        """Record usage for *prompt*, copy *rendered*, and paste if auto_paste is set.

        Never raises: usage, clipboard and paste failures, typed or not, are
        folded into the returned PasteOutcome.
        """
        logger.info("Dispatching %s (auto_paste=%s, %d chars)", prompt.id, prompt.auto_paste, len(rendered))

        try:
            self._recorder.record_use(prompt.id)
        except UsageRecordError as exc:
            logger.warning("Usage not recorded for %s: %s", prompt.id, exc)
        except Exception:
            logger.exception("Unexpected error recording usage for %s", prompt.id)

        try:
            self._clipboard.write_clipboard(rendered)
        except Exception as exc:
            if isinstance(exc, ClipboardError):
                logger.error("Clipboard write failed for %s: %s", prompt.id, exc)
            else:
                logger.exception("Unexpected clipboard error for %s", prompt.id)
            return PasteOutcome(
                clipboard_success=False,
                paste_attempted=False,
                paste_likely_success=False,
                message=f"Failed to copy to clipboard: {exc}",
            )

        self._pause(self._config.clipboard_settle_ms)
        verified = self._verify(rendered)

        if not prompt.auto_paste:
            logger.info("Auto-paste disabled for %s; copy only", prompt.id)
            return PasteOutcome(
                clipboard_success=True,
                paste_attempted=False,
                paste_likely_success=False,
                message=MSG_COPIED,
            )

        self._pause(self._config.paste_delay_ms)
        try:
            self._clipboard.trigger_paste()
            paste_ok = True
        except PasteError as exc:
            logger.warning("Paste trigger failed for %s: %s", prompt.id, exc)
            paste_ok = False
        except Exception:
            logger.exception("Unexpected paste error for %s", prompt.id)
            paste_ok = False

        likely = paste_ok and verified
        return PasteOutcome(
            clipboard_success=True,
            paste_attempted=True,
            paste_likely_success=likely,
            message=MSG_PASTED if likely else MSG_PASTE_UNCERTAIN,
        )

    def _verify(self, expected: str) -> bool:
        if not self._config.verify_clipboard or not isinstance(self._clipboard, ReadableClipboard):
            return True
        try:
            actual = self._clipboard.read_clipboard()
        except Exception as exc:
            # Write succeeded; an unreadable clipboard is not evidence of failure.
            logger.warning("Clipboard verification skipped: %s", exc)
            return True
        if actual != expected:
            logger.warning("Clipboard content mismatch after write (%d vs %d chars)", len(actual), len(expected))
            return False
        return True

    def _pause(self, ms: int) -> None:
        if ms > 0:
            self._sleep(ms / 1000)


def classify(outcome: PasteOutcome, prompt_name: str) -> Notification:
    """Map *outcome* to a success / partial / error notification."""
    if not outcome.clipboard_success:
        return Notification(kind="error", title="Copy failed", detail=outcome.message)
    if outcome.paste_attempted and not outcome.paste_likely_success:
        return Notification(
            kind="partial",
            title=outcome.message,
            detail=f'"{prompt_name}" - press Ctrl+V if needed',
        )
    return Notification(
        kind="success",
        title=outcome.message,
        detail=f'"{prompt_name}" is ready to use',
    )


def error_outcome(message: str) -> PasteOutcome:
    """Generic failure outcome for faults outside the paste protocol."""
    return PasteOutcome(
        clipboard_success=False,
        paste_attempted=False,
        paste_likely_success=False,
        message=message,
    )
