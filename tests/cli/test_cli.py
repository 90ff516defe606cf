"""CLI tests for mdlink."""

from __future__ import annotations

import logging
from pathlib import Path

from click.testing import CliRunner
from rich.logging import RichHandler

from mdlink import __version__
from mdlink.cli import Context, main, setup_logging


class TestMainCommand:
    """Tests for the main CLI command."""

    def test_help(self) -> None:
        """Test --help option."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "mdlink" in result.output
        assert "markdown" in result.output.lower()

    def test_version(self) -> None:
        """Test --version option."""
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verbose_flag(self) -> None:
        """Test -v flag is accepted."""
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "--help"])
        assert result.exit_code == 0

    def test_quiet_flag(self) -> None:
        """Test -q flag is accepted."""
        runner = CliRunner()
        result = runner.invoke(main, ["-q", "--help"])
        assert result.exit_code == 0

    def test_no_color_flag(self) -> None:
        """Test --no-color flag is accepted."""
        runner = CliRunner()
        result = runner.invoke(main, ["--no-color", "--help"])
        assert result.exit_code == 0


class TestVersionCommand:
    """Tests for the version subcommand."""

    def test_version_command(self) -> None:
        """Test version subcommand."""
        runner = CliRunner()
        result = runner.invoke(main, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestInvalidConfig:
    """Tests for invalid config handling."""

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """Test that invalid config file shows error."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("invalid: yaml: content: [")

        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(config_file), "version"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_config_in_cwd(self, tmp_path: Path) -> None:
        """Test a broken ./mdlink.yaml is reported."""
        (tmp_path / "mdlink.yaml").write_text("general:\n  colour: red\n")

        runner = CliRunner()
        result = runner.invoke(main, ["version"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestContext:
    """Tests for CLI context."""

    def test_load_config_caching(self, config_file: Path) -> None:
        """Test that config is cached in context."""
        ctx = Context()
        config1 = ctx.load_config(config_file)
        config2 = ctx.load_config(config_file)

        # Same object should be returned
        assert config1 is config2

    def test_context_defaults(self) -> None:
        """Test context default values."""
        ctx = Context()
        assert ctx.config is None
        assert ctx.profile is None
        assert ctx.verbose == 0
        assert ctx.quiet is False

    def test_converter_caching(self, config_file: Path) -> None:
        """Test the converter is built once per context."""
        ctx = Context()
        ctx.load_config(config_file)
        assert ctx.get_converter() is ctx.get_converter()

    def test_converter_uses_profile(self, config_file: Path) -> None:
        """Test the selected profile shapes the converter."""
        ctx = Context()
        ctx.load_config(config_file)
        ctx.profile = "work"
        assert ctx.get_converter().fallback_label == "host-path"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_levels(self) -> None:
        """Test each -v raises the mdlink log level."""
        setup_logging(0)
        assert logging.getLogger("mdlink").level == logging.WARNING
        setup_logging(2)
        assert logging.getLogger("mdlink").level == logging.DEBUG
        setup_logging(5)
        assert logging.getLogger("mdlink").level == logging.DEBUG

    def test_single_handler(self) -> None:
        """Test repeated setup does not stack handlers."""
        setup_logging(1)
        setup_logging(1)
        handlers = logging.getLogger("mdlink").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
