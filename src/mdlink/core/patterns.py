"""Structured path/query patterns that extract named captures from a URL.

A pattern is a sequence of path segment tokens:

- ``"pull"``: literal segment (case-sensitive)
- ``"issues|pull"``: one of several literal segments
- ``"{num}"``: capture one segment
- ``"{num:\\d+}"``: capture one segment that fully matches a regex; named
  groups inside the regex become captures too. Regexes are ASCII-only, so
  ``\\d`` means ``[0-9]``
- ``"{path+}"``: capture one or more segments, joined with ``/``
- ``"..."``: ignore any remaining segments (last token only)

Query requirements and an optional fragment regex extend the match beyond the path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from mdlink.core.url_model import NormalizedUrl

Captures = dict[str, str]

TAIL = "..."


class PathPattern(Protocol):
    """Anything that can try to extract captures from a normalized URL."""

    @property
    def capture_names(self) -> frozenset[str]: ...

    def match(self, url: NormalizedUrl) -> Captures | None: ...


@dataclass(frozen=True)
class Token:
    """One compiled segment token."""

    kind: str  # "literal", "capture", "multi" or "tail"
    name: str = ""
    choices: frozenset[str] = frozenset()
    regex: re.Pattern[str] | None = None

    @property
    def capture_names(self) -> set[str]:
        names = {self.name} if self.name else set()
        if self.regex is not None:
            names.update(self.regex.groupindex)
        return names

    def match_value(self, value: str, captures: Captures) -> bool:
        """Match a single segment (or query value), adding captures on success."""
        if self.kind == "literal":
            return value in self.choices
        if self.regex is None:
            captures[self.name] = value
            return True
        m = self.regex.fullmatch(value)
        if m is None:
            return False
        captures[self.name] = value
        captures.update({k: v or "" for k, v in m.groupdict().items()})
        return True


def parse_token(spec: str) -> Token:
    """Compile a token spec string.

    Raises:
        ValueError: If the spec is malformed.
    """
    if spec == TAIL:
        return Token("tail")
    if spec.startswith("{") and spec.endswith("}"):
        name, sep, regex = spec[1:-1].partition(":")
        if name.endswith("+"):
            if sep:
                raise ValueError(f"multi-segment capture cannot carry a regex: {spec!r}")
            name = name[:-1]
            if not name.isidentifier():
                raise ValueError(f"invalid capture name in {spec!r}")
            return Token("multi", name=name)
        if not name.isidentifier():
            raise ValueError(f"invalid capture name in {spec!r}")
        return Token("capture", name=name, regex=re.compile(regex, re.ASCII) if sep else None)
    if not spec or "/" in spec or "{" in spec:
        raise ValueError(f"invalid literal segment {spec!r}")
    return Token("literal", choices=frozenset(spec.split("|")))


def match_tokens(
    tokens: Sequence[Token],
    segments: Sequence[str],
    captures: Captures,
) -> Captures | None:
    """Match tokens against path segments.

    Multi-segment captures try the shortest run first and backtrack when the
    rest of the pattern fails. Backtracking never leaves the pattern.
    """
    if not tokens:
        return captures if not segments else None
    token, rest = tokens[0], tokens[1:]
    if token.kind == "tail":
        return captures
    if token.kind == "multi":
        for end in range(1, len(segments) + 1):
            attempt = {**captures, token.name: "/".join(segments[:end])}
            result = match_tokens(rest, segments[end:], attempt)
            if result is not None:
                return result
        return None
    if not segments:
        return None
    attempt = dict(captures)
    if not token.match_value(segments[0], attempt):
        return None
    return match_tokens(rest, segments[1:], attempt)


class SegmentPattern:
    """Pattern over path segments, query parameters and fragment.

    Args:
        *segments: Path segment token specs (see module docstring).
        query: Required query parameters, mapping key to a token spec.
        fragment: Optional regex tried against the whole fragment. Its named
            groups are always captured, as ``""`` when it does not match.
        derive: Hook computing extra captures from the extracted ones.
        derived_names: Names of the captures ``derive`` adds.
    """

    def __init__(
        self,
        *segments: str,
        query: Mapping[str, str] | None = None,
        fragment: str | None = None,
        derive: Callable[[Captures], Captures] | None = None,
        derived_names: Sequence[str] = (),
    ) -> None:
        if TAIL in segments[:-1]:
            raise ValueError(f"{TAIL!r} is only allowed as the last segment token")
        if derive is None and derived_names:
            raise ValueError("derived_names given without a derive hook")
        self.segments = tuple(segments)
        self._tokens = tuple(parse_token(spec) for spec in segments)
        self.query = dict(query or {})
        self._query = {key: parse_token(spec) for key, spec in self.query.items()}
        if any(token.kind in ("multi", "tail") for token in self._query.values()):
            raise ValueError("query values only accept literals and single captures")
        self._fragment = re.compile(fragment, re.ASCII) if fragment else None
        self._derive = derive
        self._derived_names = tuple(derived_names)

    def __repr__(self) -> str:
        return f"SegmentPattern({self.describe()!r})"

    def describe(self) -> str:
        """Human-readable form, e.g. ``/{owner}/{repo}?v={id}``."""
        text = "/" + "/".join(self.segments)
        if self.query:
            text += "?" + "&".join(f"{key}={spec}" for key, spec in self.query.items())
        if self._fragment is not None:
            text += f"#{self._fragment.pattern}"
        return text

    @property
    def capture_names(self) -> frozenset[str]:
        names: set[str] = set(self._derived_names)
        for token in (*self._tokens, *self._query.values()):
            names |= token.capture_names
        if self._fragment is not None:
            names.update(self._fragment.groupindex)
        return frozenset(names)

    def match(self, url: NormalizedUrl) -> Captures | None:
        """Try to extract captures from ``url``.

        Returns:
            A fresh captures dict on success, None otherwise.
        """
        captures = match_tokens(self._tokens, url.path_segments, {})
        if captures is None:
            return None

        for key, token in self._query.items():
            value = url.query.get(key)
            if value is None or not token.match_value(value, captures):
                return None

        if self._fragment is not None:
            m = self._fragment.fullmatch(url.fragment)
            groups = m.groupdict() if m else dict.fromkeys(self._fragment.groupindex)
            captures.update({k: v or "" for k, v in groups.items()})

        if self._derive is not None:
            captures.update(self._derive(captures))
        return captures
