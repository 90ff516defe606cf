"""URL normalization for link matching."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, unquote, urlsplit

from mdlink.exceptions import InvalidUrlError

if TYPE_CHECKING:
    from collections.abc import Mapping

ALLOWED_SCHEMES = frozenset({"http", "https"})

# Whitespace and C0/C1 control characters are never valid inside a URL
_FORBIDDEN_CHARS = re.compile(r"[\s\x00-\x1f\x7f-\x9f]")


@dataclass(frozen=True)
class NormalizedUrl:
    """Decomposed, case-normalized view of a URL used for matching."""

    scheme: str
    host: str
    path_segments: tuple[str, ...]
    query: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    fragment: str = ""
    raw: str = ""


def split_path(path: str) -> tuple[str, ...]:
    """Split a URL path into percent-decoded segments.

    Empty segments from leading, trailing, or duplicate slashes are dropped.

    Args:
        path: Raw (still percent-encoded) URL path.

    Returns:
        Tuple of decoded path segments.
    """
    return tuple(unquote(segment) for segment in path.split("/") if segment)


def parse_query(query: str) -> Mapping[str, str]:
    """Parse a query string into a read-only mapping.

    Values are percent-decoded, blank values are kept, and on duplicate
    keys the last value wins.

    Args:
        query: Raw query string (without the leading ``?``).

    Returns:
        Read-only mapping of query parameters.
    """
    return MappingProxyType(dict(parse_qsl(query, keep_blank_values=True)))


def normalize(raw: str) -> NormalizedUrl:
    """Normalize a raw URL string for matching.

    Args:
        raw: URL text, surrounding whitespace is ignored.

    Returns:
        The normalized URL.

    Raises:
        InvalidUrlError: If the text is not an absolute http(s) URL.
    """
    text = raw.strip()
    if not text:
        raise InvalidUrlError(raw, "empty input")
    if _FORBIDDEN_CHARS.search(text):
        raise InvalidUrlError(raw, "URL contains whitespace or control characters")

    try:
        parts = urlsplit(text)
        # Accessing .port validates it
        _ = parts.port
    except ValueError as e:
        raise InvalidUrlError(raw, f"malformed URL ({e})") from e

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        if not scheme:
            raise InvalidUrlError(raw)
        raise InvalidUrlError(raw, f"unsupported scheme {scheme!r}")

    host = parts.hostname
    if not host:
        raise InvalidUrlError(raw, "URL has no host")

    return NormalizedUrl(
        scheme=scheme,
        host=host.lower(),
        path_segments=split_path(parts.path),
        query=parse_query(parts.query),
        fragment=unquote(parts.fragment),
        raw=text,
    )
