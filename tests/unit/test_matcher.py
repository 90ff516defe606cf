"""Unit tests for rule matching."""

from __future__ import annotations

from mdlink.core.matcher import UNMATCHED, Matched, match
from mdlink.core.patterns import Captures, SegmentPattern
from mdlink.core.rules import DomainSuffix, ExactHost, RuleSet, ServiceRule
from mdlink.core.url_model import NormalizedUrl, normalize


class CountingPattern:
    """Pattern that records how often it runs."""

    def __init__(self, result: Captures | None) -> None:
        self.result = result
        self.calls = 0

    @property
    def capture_names(self) -> frozenset[str]:
        return frozenset(self.result or {})

    def match(self, url: NormalizedUrl) -> Captures | None:
        self.calls += 1
        return None if self.result is None else dict(self.result)


def _rules() -> RuleSet:
    return RuleSet(
        [
            ServiceRule(
                id="repo",
                host_predicate=ExactHost(("code.example",)),
                pattern=SegmentPattern("{owner}", "{repo}", "..."),
                label_template="{owner}/{repo}",
                priority=200,
            ),
            ServiceRule(
                id="pull",
                host_predicate=ExactHost(("code.example",)),
                pattern=SegmentPattern("{owner}", "{repo}", "pull", "{num}"),
                label_template="{owner}/{repo}#{num}",
                priority=100,
            ),
            ServiceRule(
                id="any-subdomain",
                host_predicate=DomainSuffix("code.example"),
                pattern=SegmentPattern("..."),
                label_template="code host",
                priority=300,
            ),
        ]
    )


class TestMatch:
    """Tests for match function."""

    def test_lowest_priority_wins(self) -> None:
        """Test the rule with the lowest priority value wins, not the first declared."""
        result = match(normalize("https://code.example/octo/widget/pull/42"), _rules())
        assert result == Matched("pull", {"owner": "octo", "repo": "widget", "num": "42"})

    def test_falls_through_to_later_rule(self) -> None:
        """Test a failing pattern moves on to the next rule."""
        result = match(normalize("https://code.example/octo/widget/issues/1"), _rules())
        assert isinstance(result, Matched)
        assert result.rule_id == "repo"

    def test_host_predicate(self) -> None:
        """Test host predicates gate rules."""
        result = match(normalize("https://docs.code.example/octo/widget"), _rules())
        assert isinstance(result, Matched)
        assert result.rule_id == "any-subdomain"

    def test_unmatched(self) -> None:
        """Test no rule matching returns UNMATCHED."""
        assert match(normalize("https://elsewhere.example/a/b"), _rules()) is UNMATCHED

    def test_empty_rules(self) -> None:
        """Test matching against no rules."""
        assert match(normalize("https://code.example/a/b"), RuleSet([])) is UNMATCHED

    def test_pattern_skipped_when_host_fails(self) -> None:
        """Test patterns only run when their host predicate succeeds."""
        pattern = CountingPattern({})
        rules = RuleSet(
            [
                ServiceRule(
                    id="counted",
                    host_predicate=ExactHost(("only.example",)),
                    pattern=pattern,
                    label_template="x",
                )
            ]
        )
        match(normalize("https://other.example/"), rules)
        assert pattern.calls == 0
        match(normalize("https://only.example/"), rules)
        assert pattern.calls == 1

    def test_deterministic(self) -> None:
        """Test repeated matching gives equal results."""
        url = normalize("https://code.example/octo/widget/pull/42")
        rules = _rules()
        assert match(url, rules) == match(url, rules)

    def test_logs_match(self, caplog) -> None:
        """Test a debug record names the rule and host."""
        caplog.set_level("DEBUG", logger="mdlink.core.matcher")
        match(normalize("https://code.example/octo/widget"), _rules())
        assert "Matched rule repo for host code.example" in caplog.text
