"""
Root Typer application for the enum-handler CLI.

    enum-handler inspect myapp.models:User
    enum-handler translate myapp.models:User status inactive
    enum-handler rewrite myapp.models:User "status = ? AND role <> ?" '!active' customer
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Any

import typer

from enum_handler import __version__
from enum_handler.cli.config import app as config_app
from enum_handler.cli.utils import (
    console,
    handle_errors,
    load_model,
    parse_value,
    print_dict,
    print_json,
    print_table,
)
from enum_handler.core.logging import configure_logging
from enum_handler.core.settings import get_settings

app = typer.Typer(
    name="enum-handler",
    help="enum-handler - symbolic enum attributes for SQLAlchemy models.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            v = pkg_version("enum-handler")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"enum-handler {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """enum-handler CLI - inspect enum definitions and translate labels."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)


# ── Commands ─────────────────────────────────────────────────────────────


def _definitions(model: Any) -> list[dict[str, Any]]:
    registry = model._enum_registry()
    rows: list[dict[str, Any]] = []
    for context, tables in registry.tables.items():
        for attribute, table in tables.items():
            rows.append(
                {
                    "attribute": attribute,
                    "context": context or None,
                    "column": registry.raw_keys.get(attribute),
                    "values": dict(table.values),
                    "sets": {name: table.expand(name) for name in table.sets},
                    "primary": table.primary,
                    "strict": table.strict,
                }
            )
    for attribute, keyed in registry.keyed.items():
        for key in keyed.keys:
            rows.append(
                {
                    "attribute": attribute,
                    "context": f"{keyed.key_attribute}={key}",
                    "column": registry.raw_keys.get(attribute),
                    "values": dict(keyed.tables[key]),
                    "sets": {},
                    "primary": False,
                    "strict": keyed.strict,
                }
            )
    return rows


@app.command("inspect")
def inspect_model(
    model_path: str = typer.Argument(..., metavar="MODULE:Model", help="Model to inspect"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """List the enum attributes a model defines."""
    model = load_model(model_path)
    rows = _definitions(model)
    if json_out:
        print_json({"model": model.__name__, "enums": rows})
        return
    print_table(rows, title=f"{model.__name__} enums")


@app.command("translate")
def translate(
    model_path: str = typer.Argument(..., metavar="MODULE:Model", help="Model defining the enum"),
    attribute: str = typer.Argument(..., help="Enum attribute"),
    values: list[str] = typer.Argument(..., help="Labels or set names (a,b for a list)"),
    context: str | None = typer.Option(None, "--context", "-c", help="Polymorphic context"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show the persisted codes for labels or sets."""
    model = load_model(model_path)
    rows = []
    with handle_errors():
        for raw in values:
            value = parse_value(raw, numbers=False)
            rows.append({"value": value, "code": model.db_code(attribute, value, context=context)})

    if json_out:
        print_json(rows)
        return
    print_table(rows, title=f"{model.__name__}.{attribute}")


@app.command("rewrite")
def rewrite(
    model_path: str = typer.Argument(..., metavar="MODULE:Model", help="Model the fragment filters"),
    statement: str = typer.Argument(..., help="SQL fragment with ? placeholders"),
    values: list[str] | None = typer.Argument(None, help="Placeholder values (a,b for a list)"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Rewrite a ``?`` fragment with enum labels translated."""
    model = load_model(model_path)
    with handle_errors():
        rewritten = model.rewrite_conditions(statement, [parse_value(v) for v in values or []])

    payload = {"sql": rewritten.sql, "params": rewritten.params}
    if json_out:
        print_json(payload)
        return
    print_dict(payload, title="Rewritten")


app.add_typer(config_app, name="config", help="Configuration inspection.")
