"""Unit tests for URL normalization."""

from __future__ import annotations

import pytest

from mdlink.core.url_model import normalize, parse_query, split_path
from mdlink.exceptions import InvalidUrlError


class TestSplitPath:
    """Tests for split_path function."""

    def test_drops_empty_segments(self) -> None:
        """Test leading, trailing and duplicate slashes are ignored."""
        assert split_path("//octo//widget/") == ("octo", "widget")

    def test_root(self) -> None:
        """Test root path has no segments."""
        assert split_path("/") == ()
        assert split_path("") == ()

    def test_percent_decoding(self) -> None:
        """Test segments are percent-decoded."""
        assert split_path("/a%20b/c%5Dd") == ("a b", "c]d")


class TestParseQuery:
    """Tests for parse_query function."""

    def test_last_value_wins(self) -> None:
        """Test duplicate keys keep the last value."""
        assert dict(parse_query("v=first&v=second")) == {"v": "second"}

    def test_blank_values_kept(self) -> None:
        """Test keys without values are kept."""
        assert dict(parse_query("flag=&x=1")) == {"flag": "", "x": "1"}

    def test_percent_decoding(self) -> None:
        """Test values are percent-decoded."""
        assert parse_query("q=a%26b+c")["q"] == "a&b c"

    def test_read_only(self) -> None:
        """Test the mapping cannot be modified."""
        query = parse_query("a=1")
        with pytest.raises(TypeError):
            query["a"] = "2"  # type: ignore[index]


class TestNormalize:
    """Tests for normalize function."""

    def test_basic(self) -> None:
        """Test decomposing a URL."""
        url = normalize("https://GitHub.com/octo/widget/pull/42?diff=split#top")
        assert url.scheme == "https"
        assert url.host == "github.com"
        assert url.path_segments == ("octo", "widget", "pull", "42")
        assert dict(url.query) == {"diff": "split"}
        assert url.fragment == "top"
        assert url.raw == "https://GitHub.com/octo/widget/pull/42?diff=split#top"

    def test_strips_surrounding_whitespace(self) -> None:
        """Test surrounding whitespace is ignored."""
        url = normalize("  http://example.com/a \n")
        assert url.raw == "http://example.com/a"
        assert url.scheme == "http"

    def test_port_is_not_part_of_host(self) -> None:
        """Test the port is dropped from the host."""
        assert normalize("http://localhost:8080/page").host == "localhost"

    def test_uppercase_scheme(self) -> None:
        """Test scheme is matched case-insensitively."""
        assert normalize("HTTPS://example.com").scheme == "https"

    def test_immutable(self) -> None:
        """Test normalized URLs cannot be modified."""
        url = normalize("https://example.com")
        with pytest.raises(AttributeError):
            url.host = "other.example"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "raw",
        [
            "not-a-url",
            "",
            "   ",
            "ftp://example.com/file",
            "mailto:someone@example.com",
            "https://",
            "http:///path/only",
            "https://exa mple.com/",
            "https://example.com/a b",
            "https://example.com:notaport/",
            "https://[::1/",
            "//example.com/relative",
        ],
    )
    def test_invalid(self, raw: str) -> None:
        """Test inputs that are not absolute http(s) URLs."""
        with pytest.raises(InvalidUrlError) as exc_info:
            normalize(raw)
        assert exc_info.value.url == raw

    def test_invalid_scheme_reason(self) -> None:
        """Test the error names the unsupported scheme."""
        with pytest.raises(InvalidUrlError, match="ftp"):
            normalize("ftp://example.com/file")
