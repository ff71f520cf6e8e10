"""System clipboard adapter: pyperclip for the clipboard, pynput for Ctrl+V.

pynput is an optional dependency (``pip install prompter[paste]``) and needs
a display server. It is imported on first paste, so copy-only use works on
headless machines; a missing or unusable pynput surfaces as PasteError,
which the orchestrator reports as "copied, paste uncertain".
"""

from __future__ import annotations

import logging
import sys

import pyperclip

from prompter.errors import ClipboardError, PasteError

logger = logging.getLogger(__name__)


class SystemClipboard:
    """ClipboardAdapter backed by the OS clipboard."""

    def write_clipboard(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(str(exc)) from exc

    def read_clipboard(self) -> str:
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(str(exc)) from exc

    def trigger_paste(self) -> None:
        try:
            from pynput.keyboard import Controller, Key
        except ImportError as exc:
            raise PasteError(
                f"keystroke injection unavailable ({exc}); install prompter[paste]"
            ) from exc

        modifier = Key.cmd if sys.platform == "darwin" else Key.ctrl
        try:
            keyboard = Controller()
            with keyboard.pressed(modifier):
                keyboard.press("v")
                keyboard.release("v")
        except Exception as exc:
            raise PasteError(f"paste keystroke failed: {exc}") from exc
        logger.debug("Paste keystroke sent")
