"""Clipboard command for mdlink."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from mdlink.context import Context
from mdlink.core import url_utils
from mdlink.core.clipboard import read_clipboard, write_clipboard
from mdlink.core.formatters import batch_exit_code, format_failure_lines, format_output_lines
from mdlink.exceptions import MdlinkError

error_console = Console(stderr=True)


@click.command("clipboard")
@click.option(
    "--write/--no-write",
    default=True,
    help="Copy the converted links back to the clipboard (default: true)",
)
@click.option(
    "--passthrough/--strict",
    default=True,
    help="Keep clipboard lines that are not URLs unchanged (default: passthrough)",
)
@click.pass_context
def clipboard_command(ctx: click.Context, write: bool, passthrough: bool) -> None:
    """Convert the URL(s) on the clipboard into Markdown links.

    Every non-blank clipboard line is converted independently. With
    passthrough, other lines (blank ones included) are kept as they are. The
    result is printed and, unless --no-write is given, copied back to the clipboard.
    """
    cli_ctx: Context = ctx.find_object(Context)  # type: ignore[assignment]

    try:
        converter = cli_ctx.get_converter()
        candidates = url_utils.split_candidates(read_clipboard(), keep_blank=passthrough)
    except MdlinkError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(e.exit_code) from e

    inputs = [candidate for candidate in candidates if candidate.text]
    if not inputs:
        error_console.print("[yellow]Clipboard is empty[/yellow]")
        return

    batch = converter.convert_many(
        [candidate.text for candidate in inputs],
        [candidate.line for candidate in inputs],
    )
    failures = batch.reportable_failures(passthrough)
    output = "\n".join(format_output_lines(candidates, batch, passthrough))

    if output:
        click.echo(output)
    for line in format_failure_lines(failures):
        error_console.print(line, soft_wrap=True)

    if write and output:
        try:
            write_clipboard(output)
        except MdlinkError as e:
            error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise SystemExit(e.exit_code) from e
        if not cli_ctx.quiet:
            error_console.print(f"Copied {batch.converted} link(s) to clipboard.")

    exit_code = batch_exit_code(batch, failures)
    if exit_code:
        raise SystemExit(exit_code)
