"""Convert command for mdlink."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from mdlink.context import Context
from mdlink.core import url_utils
from mdlink.core.formatters import (
    batch_exit_code,
    format_batch_json,
    format_failure_lines,
    format_output_lines,
)
from mdlink.exceptions import MdlinkError

error_console = Console(stderr=True)


@click.command("convert")
@click.argument("urls", nargs=-1)
@click.option(
    "--file",
    "-f",
    "url_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read URLs from file (one per line)",
)
@click.option(
    "--passthrough",
    is_flag=True,
    help="Echo inputs that are not URLs unchanged instead of reporting them",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.pass_context
def convert_command(
    ctx: click.Context,
    urls: tuple[str, ...],
    url_file: Path | None,
    passthrough: bool,
    output_format: str,
) -> None:
    """Convert URLs into Markdown links.

    URLs come from the arguments, a file, or standard input (use "-" or
    pipe text in). Each input line is converted independently.

    Examples:

        mdlink convert "https://github.com/pallets/click/pull/42"

        pbpaste | mdlink convert --passthrough
    """
    cli_ctx: Context = ctx.find_object(Context)  # type: ignore[assignment]

    stdin_text = None
    if urls == ("-",):
        urls = ()
        stdin_text = click.get_text_stream("stdin").read()
    elif not urls and not url_file and not sys.stdin.isatty():
        stdin_text = click.get_text_stream("stdin").read()

    candidates = url_utils.collect_inputs(urls, url_file, stdin_text, keep_blank=passthrough)
    inputs = [candidate for candidate in candidates if candidate.text]
    if not inputs:
        error_console.print("[yellow]No URLs provided[/yellow]")
        return

    try:
        converter = cli_ctx.get_converter()
    except MdlinkError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(e.exit_code) from e

    batch = converter.convert_many(
        [candidate.text for candidate in inputs],
        [candidate.line for candidate in inputs],
    )
    failures = batch.reportable_failures(passthrough)

    if output_format == "json":
        click.echo(format_batch_json(batch))
    else:
        for line in format_output_lines(candidates, batch, passthrough):
            click.echo(line)
        for line in format_failure_lines(failures):
            error_console.print(line, soft_wrap=True)

    exit_code = batch_exit_code(batch, failures)
    if exit_code:
        raise SystemExit(exit_code)
