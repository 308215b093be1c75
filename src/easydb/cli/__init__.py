"""
CLI layer for easydb.

Provides a Typer application whose commands delegate to
:mod:`easydb.sql.template` and :class:`easydb.Connection`.  This package
handles only terminal transport: argument parsing, coloured output, and
table formatting.

Entry point::

    easydb --help
"""

from easydb.cli.app import app

__all__ = ["app"]
