"""
CLI: ``enum-handler config`` - effective settings.
"""

from __future__ import annotations

import typer
from rich.table import Table

from enum_handler.cli.utils import console
from enum_handler.core.settings import get_settings

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show current configuration."""
    settings = get_settings()

    if format == "json":
        console.print_json(settings.model_dump_json())
        return

    if format == "env":
        for key, value in sorted(settings.model_dump().items()):
            console.print(f"ENUM_HANDLER_{key.upper()}={value}")
        return

    if format != "table":
        raise typer.BadParameter(f"unknown format {format!r}", param_hint="--format")

    table = Table(title="enum-handler settings")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)
