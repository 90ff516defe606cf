"""Shared fixtures for mdlink tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_xdg_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate XDG_CONFIG_HOME and the working directory from real config."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".xdg-config"))
    monkeypatch.chdir(tmp_path)


class FakeClipboard:
    """In-memory stand-in for the system clipboard."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.copies: list[str] = []

    def paste(self) -> str:
        return self.text

    def copy(self, text: str) -> None:
        self.copies.append(text)
        self.text = text


@pytest.fixture
def fake_clipboard(monkeypatch: pytest.MonkeyPatch) -> FakeClipboard:
    """Replace pyperclip's paste/copy with an in-memory clipboard."""
    clipboard = FakeClipboard()
    monkeypatch.setattr("pyperclip.paste", clipboard.paste)
    monkeypatch.setattr("pyperclip.copy", clipboard.copy)
    return clipboard


@pytest.fixture
def sample_config_yaml() -> str:
    """Return a sample config.yaml content."""
    return """version: 1

general:
  fallback-label: host
  github:
    orgs:
      octo:
        unmatched-repo-prefix: repo-only
        repos:
          widget:
            prefix: none

profiles:
  work:
    fallback-label: host-path
    disabled-rules:
      - youtube-video
    github:
      orgs:
        octo:
          repos:
            widget:
              prefix: org-and-repo
"""


@pytest.fixture
def config_file(tmp_path: Path, sample_config_yaml: str) -> Path:
    """Write the sample config to a file outside the search path and return it."""
    path = tmp_path / "custom-config.yaml"
    path.write_text(sample_config_yaml)
    return path
