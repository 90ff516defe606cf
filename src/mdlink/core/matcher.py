"""Rule matching: pick the first service rule that recognizes a URL."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mdlink.core.patterns import Captures
    from mdlink.core.rules import ServiceRule
    from mdlink.core.url_model import NormalizedUrl

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Matched:
    """A rule recognized the URL."""

    rule_id: str
    captures: Captures = field(default_factory=dict)


@dataclass(frozen=True)
class Unmatched:
    """No rule recognized the URL."""


UNMATCHED = Unmatched()

MatchResult = Matched | Unmatched



def match(url: NormalizedUrl, rules: Iterable[ServiceRule]) -> MatchResult:
    """Find the first rule, in evaluation order, that recognizes ``url``.

    A rule's pattern only runs when its host predicate accepts the host.
    A failing pattern moves on to the next rule.

    Args:
        url: Normalized URL to classify.
        rules: Rules in evaluation order (a RuleSet is already sorted).

    Returns:
        Matched with the rule id and its captures, or UNMATCHED.
    """
    for rule in rules:
        if not rule.host_predicate(url.host):
            continue
        captures = rule.pattern.match(url)
        if captures is not None:
            logger.debug("Matched rule %s for host %s", rule.id, url.host)
            return Matched(rule.id, captures)
    logger.debug("No rule matched host %s", url.host)
    return UNMATCHED
