"""Command line interface for mdlink: global options, logging and commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from mdlink import __version__
from mdlink.context import Context
from mdlink.exceptions import MdlinkError

# Links and listings go to stdout; diagnostics to stderr
console = Console()
error_console = Console(stderr=True)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}


def setup_logging(verbosity: int) -> None:
    """Send mdlink's log records to stderr through Rich.

    At ``-v`` each skipped input and the batch summary are logged; at
    ``-vv`` so is the rule chosen for every URL.

    Args:
        verbosity: Number of ``-v`` flags given.
    """
    logger = logging.getLogger("mdlink")
    logger.setLevel(LOG_LEVELS.get(verbosity, logging.DEBUG))
    logger.handlers = [RichHandler(console=Console(stderr=True), show_time=False)]


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Log conversion decisions (-v: skipped inputs, -vv: matched rules)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only print links and errors",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read settings from this YAML file instead of ./mdlink.yaml or the XDG path",
)
@click.option(
    "--profile",
    "-p",
    help="Configuration profile to layer over the general settings",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Print messages without color",
)
@click.version_option(version=__version__, prog_name="mdlink")
@pass_context
def main(
    ctx: Context,
    verbose: int,
    quiet: bool,
    config_path: Path | None,
    profile: str | None,
    no_color: bool,
) -> None:
    """mdlink - turn links into nice Markdown links.

    Recognizes URLs from services like GitHub, GitLab, X, Reddit or PyPI
    and labels them by what they point to, e.g. a GitHub pull request
    becomes [owner/repo#42](https://github.com/owner/repo/pull/42).
    """
    ctx.verbose = verbose
    ctx.quiet = quiet
    ctx.no_color = no_color
    ctx.profile = profile

    if no_color:
        console.no_color = True
        error_console.no_color = True

    if not quiet:
        setup_logging(verbose)

    # Rules are built lazily by the commands; a bad file fails here already
    try:
        ctx.load_config(config_path)
    except MdlinkError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(e.exit_code)


@main.command()
@pass_context
def version(_ctx: Context) -> None:
    """Print the mdlink version."""
    console.print(f"mdlink {__version__}")


def register_commands() -> None:
    """Attach the link commands to the group."""
    from mdlink.commands.clipboard import clipboard_command
    from mdlink.commands.convert import convert_command
    from mdlink.commands.rules import rules_command

    main.add_command(convert_command)
    main.add_command(clipboard_command)
    main.add_command(rules_command)


register_commands()


if __name__ == "__main__":
    main()
