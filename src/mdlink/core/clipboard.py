"""System clipboard access."""

from __future__ import annotations

import logging

import pyperclip

from mdlink.exceptions import ClipboardError

logger = logging.getLogger(__name__)


def read_clipboard() -> str:
    """Return the clipboard's text contents.

    Raises:
        ClipboardError: If no clipboard mechanism is available.
    """
    try:
        text = pyperclip.paste()
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Could not read clipboard: {e}") from e
    logger.debug("Read %d character(s) from clipboard", len(text))
    return text


def write_clipboard(text: str) -> None:
    """Replace the clipboard's contents with ``text``.

    Raises:
        ClipboardError: If no clipboard mechanism is available.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Could not write clipboard: {e}") from e
    logger.debug("Wrote %d character(s) to clipboard", len(text))
