"""Output formatting for conversion results."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.markup import escape

from mdlink.exceptions import PartialSuccessError

if TYPE_CHECKING:
    from mdlink.core.converter import BatchResult, ConversionResult
    from mdlink.core.rules import RuleSet
    from mdlink.core.url_utils import Candidate


def format_failure_lines(failures: list[ConversionResult]) -> list[str]:
    """Format failed conversions as Rich markup lines, one per input.

    Args:
        failures: Failed conversion results.

    Returns:
        List of formatted output lines for console.
    """
    return [
        f"[red]✗[/red] {escape(result.raw)}: {escape(str(result.error))}" for result in failures
    ]


def format_output_lines(
    candidates: list[Candidate],
    batch: BatchResult,
    passthrough: bool = False,
) -> list[str]:
    """Lay out the output text for a batch, one line per input line.

    ``batch`` holds the results for the non-blank candidates, in order. With
    passthrough, blank lines and inputs that are not URLs keep their original
    text, so the output lines up with the input.
    """
    results = iter(batch.results)
    lines: list[str] = []
    for candidate in candidates:
        if candidate.text:
            line = next(results).output(passthrough)
        else:
            line = candidate.line if passthrough else None
        if line is not None:
            lines.append(line)
    return lines


def format_batch_json(batch: BatchResult) -> str:
    """Format a batch of conversions as JSON.

    Args:
        batch: Batch result.

    Returns:
        JSON string.
    """
    output_data = {
        "total": batch.total,
        "converted": batch.converted,
        "results": [result.to_dict() for result in batch.results],
    }
    return json.dumps(output_data, indent=2, ensure_ascii=False)


def batch_exit_code(batch: BatchResult, failures: list[ConversionResult]) -> int:
    """Exit code for a batch: 0 if nothing failed, 2 if some inputs failed, else 1."""
    if not failures:
        return 0
    if len(failures) < batch.total:
        return PartialSuccessError.exit_code
    return 1


def rules_as_rows(rules: RuleSet) -> list[dict[str, str | int]]:
    """Describe each rule of a rule set, in evaluation order."""
    rows: list[dict[str, str | int]] = []
    for rule in rules:
        hosts = getattr(rule.host_predicate, "describe", None)
        pattern = getattr(rule.pattern, "describe", None)
        rows.append(
            {
                "priority": rule.priority,
                "id": rule.id,
                "hosts": hosts() if hosts else repr(rule.host_predicate),
                "pattern": pattern() if pattern else repr(rule.pattern),
                "label": rule.label_template,
                "description": rule.description,
            }
        )
    return rows
