"""Generic links for URLs no rule recognizes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from mdlink.core.renderer import escape_label, markdown_link

if TYPE_CHECKING:
    from mdlink.core.url_model import NormalizedUrl

FallbackLabel = Literal["host", "host-path", "url"]


def fallback_label(url: NormalizedUrl, style: FallbackLabel = "host") -> str:
    """Pick the unescaped label for an unrecognized URL."""
    if style == "url":
        return url.raw
    if style == "host-path" and url.path_segments:
        return f"{url.host}/{url.path_segments[0]}"
    return url.host


def fallback(url: NormalizedUrl, style: FallbackLabel = "host") -> str:
    """Render a generic Markdown link for ``url``.

    Never fails for a normalized URL.
    """
    return markdown_link(escape_label(fallback_label(url, style)), url.raw)
