"""Rules command for mdlink."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mdlink.context import Context
from mdlink.core.formatters import rules_as_rows
from mdlink.exceptions import MdlinkError

console = Console()
error_console = Console(stderr=True)


@click.command("rules")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.pass_context
def rules_command(ctx: click.Context, output_format: str) -> None:
    """List the service rules in evaluation order.

    The first rule whose hosts and pattern match a URL labels it.
    """
    cli_ctx: Context = ctx.find_object(Context)  # type: ignore[assignment]

    try:
        rules = cli_ctx.get_converter().rules
    except MdlinkError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(e.exit_code) from e

    rows = rules_as_rows(rules)

    if output_format == "json":
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="Service rules")
    table.add_column("Priority", justify="right")
    table.add_column("Id")
    table.add_column("Hosts")
    table.add_column("Pattern")
    table.add_column("Label")
    for row in rows:
        table.add_row(
            str(row["priority"]),
            escape(str(row["id"])),
            escape(str(row["hosts"])),
            escape(str(row["pattern"])),
            escape(str(row["label"])),
        )
    console.print(table)
