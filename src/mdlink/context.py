"""CLI context object for mdlink."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mdlink.config import load_config

if TYPE_CHECKING:
    from mdlink.config import Config
    from mdlink.core.converter import Converter


class Context:
    """CLI context object holding configuration and settings."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.config_path: Path | None = None
        self.profile: str | None = None
        self.verbose: int = 0
        self.quiet: bool = False
        self.no_color: bool = False
        self._converter: Converter | None = None

    def load_config(self, config_path: Path | None = None) -> Config:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = load_config(config_path)
            self.config_path = config_path
        return self.config

    def get_converter(self) -> Converter:
        """Build (once) the converter for the selected profile.

        Raises:
            ConfigError: If the profile or the rule settings are invalid.
        """
        if self._converter is None:
            config = self.load_config(self.config_path)
            self._converter = config.layers(self.profile).build_converter()
        return self._converter
