"""
CLI: ``easydb render | query | exec`` — run templates from the terminal.
"""

from __future__ import annotations

import asyncio

import typer

from easydb.cli.utils import output_rows, output_statement, output_update, parse_args, reporting_errors
from easydb.connection import create_connection
from easydb.dialect import get_dialect
from easydb.sql.template import compile_template


def render(
    template: str = typer.Argument(..., help="SQL template with #escaped# / $raw$ placeholders"),
    arg: list[str] | None = typer.Option(None, "--arg", "-a", help="NAME=VALUE (repeatable)"),
    dialect: str = typer.Option("sqlite", "--dialect", help="sqlite, postgresql or mysql"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Compile a template and print the SQL and bound parameters (no database)."""
    args = parse_args(arg)
    with reporting_errors():
        stmt = compile_template(template, args, get_dialect(dialect))
    output_statement(stmt, as_json=json_out)


def query(
    template: str = typer.Argument(..., help="SELECT template"),
    arg: list[str] | None = typer.Option(None, "--arg", "-a", help="NAME=VALUE (repeatable)"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL (default: EASYDB_DATABASE_URL)"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Run a query template and print the rows."""
    args = parse_args(arg)

    async def _run():
        async with create_connection(database) as conn:
            return await conn.exec_query(template, args)

    with reporting_errors():
        rows = asyncio.run(_run())
    output_rows(rows, as_json=json_out)


def exec_(
    template: str = typer.Argument(..., help="INSERT / UPDATE / DELETE template"),
    arg: list[str] | None = typer.Option(None, "--arg", "-a", help="NAME=VALUE (repeatable)"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL (default: EASYDB_DATABASE_URL)"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Run an update template and print rows affected / insert id."""
    args = parse_args(arg)

    async def _run():
        async with create_connection(database) as conn:
            return await conn.exec_update(template, args)

    with reporting_errors():
        result = asyncio.run(_run())
    output_update(result, as_json=json_out)
