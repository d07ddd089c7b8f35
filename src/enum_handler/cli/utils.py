"""
CLI utility helpers: model loading, value parsing and output formatting.
"""

from __future__ import annotations

import importlib
import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from enum_handler.core.errors import EnumHandlerError

console = Console()
err_console = Console(stderr=True)


# ── Input helpers ────────────────────────────────────────────────────────


def load_model(path: str) -> Any:
    """Import ``package.module:Model`` and return the class."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"expected MODULE:Model, got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"cannot import {module_name!r}: {e}") from e

    model = module
    for part in attr.split("."):
        model = getattr(model, part, None)
        if model is None:
            raise typer.BadParameter(f"{module_name!r} has no attribute {attr!r}")
    if not hasattr(model, "_enum_registry"):
        raise typer.BadParameter(f"{path!r} is not an enum-handled model")
    return model


def parse_value(raw: str, *, numbers: bool = True) -> Any:
    """``"a,b"`` -> ``["a", "b"]``; ``"42"`` -> ``42`` (when ``numbers``)."""
    if "," in raw:
        return [parse_value(part.strip(), numbers=numbers) for part in raw.split(",") if part.strip()]
    if numbers and raw.lstrip("-").isdigit():
        return int(raw)
    return raw


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print library errors in red and exit with status 1."""
    try:
        yield
    except EnumHandlerError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(escape(_cell(v)) for v in row.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}", soft_wrap=True)


def _cell(value: Any) -> str:
    if isinstance(value, dict):
        return ", ".join(f"{k}={v!r}" for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)
