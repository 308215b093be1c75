"""
CLI utility helpers — argument parsing, output formatting, error reporting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from easydb.errors import EasyDBError
from easydb.result import UpdateResult
from easydb.sql.template import CompiledStatement

console = Console()
err_console = Console(stderr=True)


# ── Argument parsing ─────────────────────────────────────────────────────


def parse_args(pairs: list[str] | None) -> dict[str, Any]:
    """Turn ``["name=O'Brien", "age=30"]`` into a template-args mapping.

    Values are read as JSON when they parse (numbers, ``true``, ``null``,
    lists) and kept as plain strings otherwise.
    """
    args: dict[str, Any] = {}
    for pair in pairs or []:
        name, sep, raw = pair.partition("=")
        if not sep or not name:
            err_console.print(f"[bold red]Error[/bold red]: --arg expects NAME=VALUE, got {pair!r}")
            raise typer.Exit(code=2)
        try:
            args[name] = json.loads(raw)
        except ValueError:
            args[name] = raw
    return args


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Print an ``EasyDBError`` as a one-line message and exit 1."""
    try:
        yield
    except EasyDBError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e


# ── Output helpers ───────────────────────────────────────────────────────


def output_statement(stmt: CompiledStatement, *, as_json: bool = False) -> None:
    """Render a compiled statement (SQL plus bound parameters)."""
    if as_json:
        console.print_json(json.dumps({"sql": stmt.sql, "params": list(stmt.params)}, default=str))
        return
    console.print(stmt.sql, markup=False, highlight=False)
    for i, value in enumerate(stmt.params, start=1):
        console.print(f"  [cyan]{i}[/cyan]: {value!r}", highlight=False)


def output_rows(rows: list[dict[str, Any]], *, as_json: bool = False, title: str = "") -> None:
    """Render query rows as a Rich table (or JSON)."""
    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return
    if not rows:
        console.print("[dim]No rows.[/dim]")
        return
    _print_table(rows, title=title)


def output_update(result: UpdateResult, *, as_json: bool = False) -> None:
    """Render an ``UpdateResult``."""
    if as_json:
        console.print_json(json.dumps(result.to_dict()))
        return
    _print_dict(asdict(result))


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(str(col), overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
