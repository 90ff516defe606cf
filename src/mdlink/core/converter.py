"""URL to Markdown link conversion pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mdlink.core.fallback import fallback
from mdlink.core.matcher import Matched, match
from mdlink.core.renderer import render
from mdlink.core.rules import default_rules
from mdlink.core.url_model import normalize
from mdlink.exceptions import InvalidUrlError, MdlinkError, TemplateInconsistencyError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from mdlink.core.fallback import FallbackLabel
    from mdlink.core.rules import RuleSet

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of converting one input string."""

    raw: str
    markdown: str | None = None
    rule_id: str | None = None
    error: MdlinkError | None = None
    source: str | None = None  # untouched input line

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def recognized(self) -> bool:
        """True when a service rule (rather than the fallback) produced the link."""
        return self.rule_id is not None

    def unwrap(self) -> str:
        """Return the Markdown link, or raise the stored error."""
        if self.error is not None:
            raise self.error
        assert self.markdown is not None
        return self.markdown

    def output(self, passthrough: bool = False) -> str | None:
        """Output line for this input, or None when it produces none.

        With ``passthrough``, inputs that are not URLs come back exactly as
        they were given.
        """
        if self.ok:
            return self.markdown
        if passthrough and isinstance(self.error, InvalidUrlError):
            return self.raw if self.source is None else self.source
        return None

    def to_dict(self) -> dict[str, str | bool | None]:
        return {
            "input": self.raw,
            "ok": self.ok,
            "markdown": self.markdown,
            "rule": self.rule_id,
            "error": str(self.error) if self.error else None,
        }


@dataclass
class BatchResult:
    """Results of converting several inputs, in input order."""

    results: list[ConversionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def converted(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failures(self) -> list[ConversionResult]:
        return [result for result in self.results if not result.ok]

    def render_lines(self, passthrough: bool = False) -> Iterator[str]:
        """Yield one output line per input.

        Args:
            passthrough: Echo inputs that are not URLs unchanged instead of
                dropping them.
        """
        for result in self.results:
            line = result.output(passthrough)
            if line is not None:
                yield line

    def reportable_failures(self, passthrough: bool = False) -> list[ConversionResult]:
        """Failures to report to the user; passed-through inputs are not failures."""
        return [
            result
            for result in self.failures
            if not (passthrough and isinstance(result.error, InvalidUrlError))
        ]


class Converter:
    """Turns raw URL strings into Markdown links using a rule set.

    The rule set is read-only, so one converter can be shared freely.
    """

    def __init__(
        self,
        rules: RuleSet | None = None,
        fallback_label: FallbackLabel = "host",
    ) -> None:
        self.rules = rules if rules is not None else default_rules()
        self.fallback_label: FallbackLabel = fallback_label

    def convert(self, raw: str, source: str | None = None) -> ConversionResult:
        """Convert one URL string.

        Never raises for bad input or rule defects; those are returned
        in ``ConversionResult.error``.

        Args:
            raw: URL text to convert.
            source: Input line ``raw`` was taken from, echoed by passthrough.
        """
        result = self._convert(raw)
        result.source = source
        return result

    def _convert(self, raw: str) -> ConversionResult:
        try:
            url = normalize(raw)
        except InvalidUrlError as e:
            logger.info("Not converting %r: %s", raw, e.reason)
            return ConversionResult(raw=raw, error=e)

        result = match(url, self.rules)
        if not isinstance(result, Matched):
            return ConversionResult(raw=raw, markdown=fallback(url, self.fallback_label))

        try:
            markdown = render(result.rule_id, result.captures, url.raw, self.rules)
        except TemplateInconsistencyError as e:
            logger.error("Rule %s is inconsistent: %s", result.rule_id, e)
            return ConversionResult(raw=raw, rule_id=result.rule_id, error=e)
        return ConversionResult(raw=raw, markdown=markdown, rule_id=result.rule_id)

    def convert_many(
        self,
        inputs: Iterable[str],
        sources: Iterable[str] | None = None,
    ) -> BatchResult:
        """Convert each input independently, keeping input order.

        Args:
            inputs: URL strings to convert.
            sources: Input lines, one per input, echoed by passthrough.
        """
        if sources is None:
            batch = BatchResult([self.convert(raw) for raw in inputs])
        else:
            batch = BatchResult(
                [self.convert(raw, source) for raw, source in zip(inputs, sources, strict=True)]
            )
        logger.info("Converted %d of %d input(s)", batch.converted, batch.total)
        return batch


def convert(raw: str, rules: RuleSet | None = None) -> ConversionResult:
    """Convert one URL string with a throwaway converter."""
    return Converter(rules).convert(raw)
