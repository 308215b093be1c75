"""Dual-sigil SQL template compiler.

A template is plain SQL with two kinds of named placeholder:

``#name#``
    *Escaped.*  The value is always sent to the driver as a bound
    parameter, whatever it contains.  Use it for strings, dates and any
    user input.

``$name$``
    *Raw.*  The value is inlined as text with no escaping.  Use it for
    trusted numbers or whole SQL clauses; the caller owns the injection
    risk.

Arguments are either a mapping (matched by name, regardless of
placeholder kind; a name used twice gets the same value twice) or a
sequence (one value per placeholder occurrence, left to right).

Examples:
    >>> from easydb.dialect import get_dialect
    >>> stmt = compile_template(
    ...     "SELECT * FROM t WHERE a = #a# AND b = $b$",
    ...     {"a": "x'y", "b": 3},
    ...     get_dialect("postgresql"),
    ... )
    >>> stmt.sql
    'SELECT * FROM t WHERE a = $1 AND b = 3'
    >>> stmt.params
    ("x'y",)

Tags:
    template, placeholders, sql, injection-safety, easydb
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union

from easydb.dialect import Dialect
from easydb.errors import TemplateError

_PLACEHOLDER_RE = re.compile(r"#(\w+)#|\$(\w+)\$")

Args = Union[Mapping[str, Any], Sequence[Any], None]


@dataclass(frozen=True)
class Literal:
    """Plain SQL text between placeholders."""

    text: str


@dataclass(frozen=True)
class Escaped:
    """``#name#`` — bound as a driver parameter."""

    name: str


@dataclass(frozen=True)
class Raw:
    """``$name$`` — inlined as text."""

    name: str


Token = Union[Literal, Escaped, Raw]


@dataclass(frozen=True)
class CompiledStatement:
    """Driver-ready SQL plus its bound parameters, in placeholder order."""

    sql: str
    params: tuple[Any, ...]
    template: str


@lru_cache(maxsize=512)
def tokenize(template: str) -> tuple[Token, ...]:
    """Split ``template`` into literal text and placeholder tokens.

    A ``#`` or ``$`` that does not close a ``\\w+`` name stays literal text.
    """
    tokens: list[Token] = []
    pos = 0
    for match in _PLACEHOLDER_RE.finditer(template):
        if match.start() > pos:
            tokens.append(Literal(template[pos:match.start()]))
        escaped, raw = match.groups()
        tokens.append(Escaped(escaped) if escaped is not None else Raw(raw))
        pos = match.end()
    if pos < len(template):
        tokens.append(Literal(template[pos:]))
    return tuple(tokens)


def placeholder_names(template: str) -> list[str]:
    """Placeholder names in order of occurrence (repeats included)."""
    return [t.name for t in tokenize(template) if not isinstance(t, Literal)]


def _resolve_values(template: str, tokens: tuple[Token, ...], args: Args) -> list[Any]:
    """One value per placeholder occurrence, in occurrence order."""
    slots = [t for t in tokens if not isinstance(t, Literal)]

    if args is None:
        args = {}

    if isinstance(args, Mapping):
        values = []
        for slot in slots:
            if slot.name not in args:
                raise TemplateError(
                    f"No argument for placeholder '{slot.name}'",
                    template=template,
                    placeholder=slot.name,
                )
            values.append(args[slot.name])
        return values

    if isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
        raise TemplateError(
            f"Template arguments must be a mapping or a sequence, got {type(args).__name__}",
            template=template,
        )

    if len(args) != len(slots):
        raise TemplateError(
            f"Template has {len(slots)} placeholder(s) but {len(args)} positional argument(s) were given",
            template=template,
        )
    return list(args)


def compile_template(template: str, args: Args, dialect: Dialect) -> CompiledStatement:
    """Substitute ``args`` into ``template`` for the given dialect.

    Raises:
        TemplateError: Missing named argument, positional count mismatch,
            or ``args`` of the wrong type.
    """
    tokens = tokenize(template)
    values = iter(_resolve_values(template, tokens, args))

    parts: list[str] = []
    params: list[Any] = []
    for token in tokens:
        if isinstance(token, Literal):
            parts.append(dialect.escape_literal(token.text))
        elif isinstance(token, Escaped):
            parts.append(dialect.placeholder(len(params)))
            params.append(next(values))
        else:
            parts.append(dialect.escape_literal(str(next(values))))

    return CompiledStatement(sql="".join(parts), params=tuple(params), template=template)


__all__ = [
    "Args",
    "Literal",
    "Escaped",
    "Raw",
    "Token",
    "CompiledStatement",
    "tokenize",
    "placeholder_names",
    "compile_template",
]
