"""Configuration loading and validation for mdlink."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel, ConfigDict, Field

from mdlink.core.converter import Converter
from mdlink.core.fallback import FallbackLabel
from mdlink.core.rules import RepoPrefix, default_rules
from mdlink.exceptions import ConfigError, RuleSetError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mdlink.core.rules import RuleSet


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class _Model(BaseModel):
    """Base for config models: kebab-case keys, unknown keys rejected."""

    model_config = ConfigDict(extra="forbid", alias_generator=_kebab, populate_by_name=True)


class RepoEntry(_Model):
    """Settings for one GitHub repository."""

    prefix: RepoPrefix | None = None


class OrgEntry(_Model):
    """Settings for one GitHub organization (or user)."""

    unmatched_repo_prefix: RepoPrefix | None = None
    repos: dict[str, RepoEntry] = Field(default_factory=dict)


class GithubConfig(_Model):
    """Configuration for GitHub link labels."""

    orgs: dict[str, OrgEntry] = Field(default_factory=dict)


class ConfigLayer(_Model):
    """A single layer of configuration: ``general`` or one profile."""

    fallback_label: FallbackLabel | None = None
    disabled_rules: list[str] = Field(default_factory=list)
    github: GithubConfig = Field(default_factory=GithubConfig)


class Config(_Model):
    """Main configuration for mdlink."""

    version: int = 1
    general: ConfigLayer = Field(default_factory=ConfigLayer)
    profiles: dict[str, ConfigLayer] = Field(default_factory=dict)

    def layers(self, profile: str | None = None) -> Layered:
        """Select the configuration layers for a profile.

        Args:
            profile: Profile name, or None for ``general`` only.

        Returns:
            Layered view, most specific layer first.

        Raises:
            ConfigError: If the profile is not defined.
        """
        if profile is None:
            return Layered(general=self.general)
        if profile not in self.profiles:
            known = ", ".join(sorted(self.profiles)) or "none"
            raise ConfigError(f"Unknown profile {profile!r} (defined: {known})")
        return Layered(general=self.general, profile=self.profiles[profile])


@dataclass(frozen=True)
class Layered:
    """Configuration layers applicable to one profile selection."""

    general: ConfigLayer
    profile: ConfigLayer | None = None

    def inwards(self) -> Iterator[ConfigLayer]:
        """Iterate over layers, from most to least specific."""
        if self.profile is not None:
            yield self.profile
        yield self.general

    @property
    def fallback_label(self) -> FallbackLabel:
        for layer in self.inwards():
            if layer.fallback_label is not None:
                return layer.fallback_label
        return "host"

    @property
    def disabled_rules(self) -> list[str]:
        disabled: list[str] = []
        for layer in self.inwards():
            disabled.extend(rule for rule in layer.disabled_rules if rule not in disabled)
        return disabled

    def repo_prefix(self, owner: str, repo: str) -> RepoPrefix:
        """Resolve how much of ``owner/repo`` GitHub labels carry.

        Repository settings win over the organization's fallback; within
        each, the most specific layer wins.
        """
        orgs = [layer.github.orgs[owner] for layer in self.inwards() if owner in layer.github.orgs]
        for org in orgs:
            entry = org.repos.get(repo)
            if entry is not None and entry.prefix is not None:
                return entry.prefix
        for org in orgs:
            if org.unmatched_repo_prefix is not None:
                return org.unmatched_repo_prefix
        return "org-and-repo"

    def build_rules(self) -> RuleSet:
        """Build the rule catalog these layers describe.

        Raises:
            ConfigError: If a disabled rule id is unknown.
        """
        try:
            return default_rules(repo_prefix=self.repo_prefix, disabled=self.disabled_rules)
        except RuleSetError as e:
            raise ConfigError(f"Invalid disabled-rules: {e}") from e

    def build_converter(self) -> Converter:
        return Converter(self.build_rules(), fallback_label=self.fallback_label)


def get_xdg_config_home() -> Path:
    """Get the XDG config home directory.

    Returns:
        Path to the XDG config home (respects XDG_CONFIG_HOME env var).
    """
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def get_xdg_config_path() -> Path:
    """Get the XDG config file path (~/.config/mdlink/config.yaml)."""
    return get_xdg_config_home() / "mdlink" / "config.yaml"


def find_config_file(config_path: Path | None = None) -> Path | None:
    """Find the configuration file using XDG conventions.

    Search order (first found wins):
    1. --config PATH (command line override)
    2. ./mdlink.yaml (current directory)
    3. $XDG_CONFIG_HOME/mdlink/config.yaml (typically ~/.config/mdlink/config.yaml)

    Args:
        config_path: Optional explicit config path from command line.

    Returns:
        Path to config file if found, None otherwise.
    """
    if config_path is not None:
        if config_path.exists():
            return config_path
        raise ConfigError(f"Config file not found: {config_path}")

    cwd_config = Path("mdlink.yaml")
    if cwd_config.exists():
        return cwd_config

    xdg_config = get_xdg_config_path()
    if xdg_config.exists():
        return xdg_config

    return None


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file or return defaults.

    Args:
        config_path: Optional explicit config path.

    Returns:
        Config object with loaded or default values.

    Raises:
        ConfigError: If config file exists but is invalid.
    """
    found_path = find_config_file(config_path)

    if found_path is None:
        return Config()

    try:
        with found_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read config file: {e}") from e

    if data is None:
        return Config()

    try:
        return Config.model_validate(data)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
