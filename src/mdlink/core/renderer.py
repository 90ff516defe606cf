"""Render matched captures into a Markdown link."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from mdlink.exceptions import TemplateInconsistencyError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mdlink.core.rules import RuleSet

_NEWLINES = re.compile(r"\r\n|\r|\n")
_LABEL_SPECIALS = re.compile(r"([\\\[\]`])")

# Characters that would end the (url) part of a link or open a code span
_URL_ESCAPES = {" ": "%20", "(": "%28", ")": "%29", "<": "%3C", ">": "%3E", "`": "%60"}


def escape_label(text: str) -> str:
    """Escape text for use inside the ``[...]`` part of a Markdown link.

    Backslashes, square brackets and backticks are backslash-escaped; each
    line break becomes a single space.
    """
    return _LABEL_SPECIALS.sub(r"\\\1", _NEWLINES.sub(" ", text))


def escape_url(url: str) -> str:
    """Percent-encode characters that would terminate a link target early."""
    return "".join(_URL_ESCAPES.get(char, char) for char in url)


def markdown_link(label: str, url: str) -> str:
    """Build ``[label](url)`` from an already escaped label."""
    return f"[{label}]({escape_url(url)})"


class _Captures(dict):  # type: ignore[type-arg]
    def __init__(self, rule_id: str, values: Mapping[str, str]) -> None:
        super().__init__(values)
        self.rule_id = rule_id

    def __missing__(self, key: str) -> str:
        raise TemplateInconsistencyError(self.rule_id, key)


def render(rule_id: str, captures: Mapping[str, str], raw_url: str, rules: RuleSet) -> str:
    """Render a matched rule's label template as a Markdown link.

    Args:
        rule_id: Id of the rule that matched.
        captures: Captures produced by that rule.
        raw_url: URL to link to.
        rules: Rule set the rule came from.

    Returns:
        Single-line ``[label](url)`` string.

    Raises:
        TemplateInconsistencyError: If the rule is unknown or its template
            needs a capture that was not produced.
    """
    rule = rules.get(rule_id)
    if rule is None:
        raise TemplateInconsistencyError(rule_id)
    escaped = _Captures(rule_id, {name: escape_label(value) for name, value in captures.items()})
    label = rule.label_template.format_map(escaped)
    return markdown_link(label, raw_url)
