"""Input collection utilities for mdlink."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from pathlib import Path


class Candidate(NamedTuple):
    """One input line and the text to convert from it."""

    text: str
    line: str


def clean_candidate(line: str) -> str:
    """Strip whitespace and a surrounding pair of angle brackets.

    Handles:
    - Plain URLs: https://example.com
    - Angle bracket URLs: <https://example.com>

    Args:
        line: Line of text.

    Returns:
        The candidate string to convert.
    """
    line = line.strip()
    if line.startswith("<") and line.endswith(">"):
        line = line[1:-1].strip()
    return line


def split_candidates(text: str, keep_blank: bool = False) -> list[Candidate]:
    """Split multi-line text (clipboard, stdin, file) into candidate inputs.

    Each candidate keeps its untouched line next to the cleaned text.

    Args:
        text: Raw text.
        keep_blank: Keep blank lines as candidates with empty text.

    Returns:
        Candidates in input order.
    """
    candidates = []
    for line in text.splitlines():
        candidate = Candidate(clean_candidate(line), line)
        if candidate.text or keep_blank:
            candidates.append(candidate)
    return candidates


def read_candidates_from_file(filepath: Path, keep_blank: bool = False) -> list[Candidate]:
    """Read candidate inputs from a file, one per line.

    Args:
        filepath: Path to the file.
        keep_blank: Keep blank lines.

    Returns:
        List of candidates.
    """
    return split_candidates(filepath.read_text(encoding="utf-8"), keep_blank)


def collect_inputs(
    cli_urls: tuple[str, ...],
    url_file: Path | None = None,
    stdin_text: str | None = None,
    keep_blank: bool = False,
) -> list[Candidate]:
    """Collect inputs from CLI arguments, an optional file and optional stdin text.

    Blank arguments are always skipped; ``keep_blank`` only applies to lines
    of the file and stdin text.

    Args:
        cli_urls: URLs provided as CLI arguments.
        url_file: Optional path to file containing URLs.
        stdin_text: Optional text read from standard input.
        keep_blank: Keep blank lines.

    Returns:
        Combined list of all candidates, arguments first.
    """
    inputs = [Candidate(clean_candidate(url), url) for url in cli_urls if url.strip()]
    if url_file:
        inputs.extend(read_candidates_from_file(url_file, keep_blank))
    if stdin_text:
        inputs.extend(split_candidates(stdin_text, keep_blank))
    return inputs
