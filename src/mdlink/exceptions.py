"""Custom exceptions for mdlink."""

from __future__ import annotations


class MdlinkError(Exception):
    """Base exception for all mdlink errors."""

    exit_code: int = 1


class ConfigError(MdlinkError):
    """Configuration file errors."""


class InvalidUrlError(MdlinkError):
    """Input is not an absolute HTTP or HTTPS URL."""

    def __init__(self, url: str, reason: str = "not an absolute http(s) URL") -> None:
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class TemplateInconsistencyError(MdlinkError):
    """A rule's label template references a capture the rule did not produce.

    This is an internal defect of the rule catalog, not a problem with the input.
    """

    exit_code: int = 3

    def __init__(self, rule_id: str, placeholder: str | None = None) -> None:
        if placeholder is None:
            super().__init__(f"no rule with id {rule_id!r}")
        else:
            super().__init__(f"rule {rule_id!r} has no capture named {placeholder!r}")
        self.rule_id = rule_id
        self.placeholder = placeholder


class RuleSetError(MdlinkError):
    """Invalid rule catalog (duplicate ids, undeclared template placeholders)."""

    exit_code: int = 3


class ClipboardError(MdlinkError):
    """Clipboard read/write errors."""


class PartialSuccessError(MdlinkError):
    """Some conversions succeeded, some failed."""

    exit_code: int = 2
