"""
Root Typer application for the easydb CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from easydb.cli import statements
from easydb.logging import configure_logging
from easydb.settings import get_settings

app = Typer(
    name="easydb",
    help="easydb — run dual-sigil SQL templates against SQLite, PostgreSQL or MySQL.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("easydb")
        except PackageNotFoundError:
            from easydb import __version__ as v
        typer.echo(f"easydb {v}")
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
    log_level: str | None = typer.Option(None, "--log-level", help="Override EASYDB_LOG_LEVEL"),
) -> None:
    """easydb CLI — render, query and execute SQL templates."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_format=settings.log_json)


# ── Commands ─────────────────────────────────────────────────────────────

app.command(name="render")(statements.render)
app.command(name="query")(statements.query)
app.command(name="exec")(statements.exec_)
