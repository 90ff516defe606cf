"""Unit tests for clipboard access."""

from __future__ import annotations

import pyperclip
import pytest

from mdlink.core.clipboard import read_clipboard, write_clipboard
from mdlink.exceptions import ClipboardError


class TestClipboard:
    """Tests for read_clipboard and write_clipboard."""

    def test_read(self, fake_clipboard) -> None:
        """Test reading the clipboard."""
        fake_clipboard.text = "https://example.com"
        assert read_clipboard() == "https://example.com"

    def test_write(self, fake_clipboard) -> None:
        """Test writing the clipboard."""
        write_clipboard("[example.com](https://example.com)")
        assert fake_clipboard.copies == ["[example.com](https://example.com)"]

    def test_read_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing clipboard mechanism is reported."""

        def paste() -> str:
            raise pyperclip.PyperclipException("no clipboard mechanism")

        monkeypatch.setattr("pyperclip.paste", paste)
        with pytest.raises(ClipboardError, match="Could not read clipboard"):
            read_clipboard()

    def test_write_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a failing write is reported."""

        def copy(text: str) -> None:
            raise pyperclip.PyperclipException("no clipboard mechanism")

        monkeypatch.setattr("pyperclip.copy", copy)
        with pytest.raises(ClipboardError, match="Could not write clipboard"):
            write_clipboard("x")
