"""Condition builder — field → operator spec to WHERE fragments.

A condition is a mapping from field name to either a spec
``{"exp": <operator>, "value": <value>}`` or a bare scalar (shorthand for
``{"exp": "=", "value": scalar}``).

Operators::

    =  <>  !=  >  <  >=  <=       any scalar        field OP #p#
    like                          str               field LIKE #p#
    startsWith                    str               field LIKE #p#   (value + '%')
    endsWith                      str               field LIKE #p#   ('%' + value)
    in  not-in                    sequence          field [NOT] IN (#p1#, #p2#, ...)
    between                       2-item sequence   field BETWEEN #p1# AND #p2#

Fragments are rendered in template form: every value goes through an
escaped ``#__cN#`` placeholder, so the template compiler binds it as a
driver parameter. The builder never inlines a value.

Examples:
    >>> sql, args = where_clause({"status": "active", "age": {"exp": "between", "value": [18, 30]}})
    >>> sql
    'status = #__c0# AND age BETWEEN #__c1# AND #__c2#'
    >>> args
    {'__c0': 'active', '__c1': 18, '__c2': 30}
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass, field
from itertools import count
from typing import Any

from easydb.errors import ValidationError

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

COMPARISON_OPERATORS = frozenset({"=", "<>", "!=", ">", "<", ">=", "<="})
LIKE_OPERATORS = frozenset({"like", "startsWith", "endsWith"})
SET_OPERATORS = frozenset({"in", "not-in"})
RANGE_OPERATORS = frozenset({"between"})
OPERATORS = COMPARISON_OPERATORS | LIKE_OPERATORS | SET_OPERATORS | RANGE_OPERATORS

NO_OP_CLAUSE = "1 = 1"
NEVER_CLAUSE = "1 = 0"

PARAM_PREFIX = "__c"


@dataclass(frozen=True)
class ConditionClause:
    """One rendered WHERE fragment and the arguments its placeholders need."""

    field: str
    sql: str
    args: dict[str, Any] = field(default_factory=dict)


def validate_identifier(name: Any, *, what: str = "field") -> str:
    """Return ``name`` if it is a plain (optionally ``alias.``-qualified) identifier."""
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise ValidationError(
            f"Invalid {what} name: {name!r}",
            field=name if isinstance(name, str) else None,
            value=name,
            constraint="identifier",
        )
    return name


def normalize(spec: Any) -> tuple[str, Any]:
    """Return ``(exp, value)`` for a spec mapping or a bare scalar."""
    if isinstance(spec, Mapping):
        if "exp" not in spec or "value" not in spec:
            raise ValidationError(
                "Condition spec must have 'exp' and 'value' keys",
                value=dict(spec),
                constraint="shape",
            )
        return spec["exp"], spec["value"]
    return "=", spec


def is_sequence(value: Any) -> bool:
    return isinstance(value, (Sequence, Set)) and not isinstance(value, (str, bytes, bytearray))


def _render(name: str, exp: Any, value: Any, counter: count) -> ConditionClause:
    def param(v: Any) -> str:
        key = f"{PARAM_PREFIX}{next(counter)}"
        args[key] = v
        return f"#{key}#"

    args: dict[str, Any] = {}

    if not isinstance(exp, str) or exp not in OPERATORS:
        raise ValidationError(
            f"Unknown condition operator {exp!r} for field '{name}'",
            field=name,
            value=exp,
            constraint="operator",
        )

    if exp in COMPARISON_OPERATORS:
        if value is None and exp == "=":
            return ConditionClause(name, f"{name} IS NULL")
        if value is None and exp in ("<>", "!="):
            return ConditionClause(name, f"{name} IS NOT NULL")
        if is_sequence(value) or isinstance(value, Mapping):
            raise ValidationError(
                f"Operator '{exp}' on field '{name}' needs a scalar value",
                field=name,
                value=value,
                constraint="scalar",
            )
        return ConditionClause(name, f"{name} {exp} {param(value)}", args)

    if exp in LIKE_OPERATORS:
        if not isinstance(value, str):
            raise ValidationError(
                f"Operator '{exp}' on field '{name}' needs a string value",
                field=name,
                value=value,
                constraint="string",
            )
        if exp == "startsWith":
            value = f"{value}%"
        elif exp == "endsWith":
            value = f"%{value}"
        return ConditionClause(name, f"{name} LIKE {param(value)}", args)

    if exp in SET_OPERATORS:
        if not is_sequence(value):
            raise ValidationError(
                f"Operator '{exp}' on field '{name}' needs a sequence value",
                field=name,
                value=value,
                constraint="sequence",
            )
        items = list(value)
        negate = exp == "not-in"
        if not items:
            return ConditionClause(name, NO_OP_CLAUSE if negate else NEVER_CLAUSE)
        keyword = "NOT IN" if negate else "IN"
        return ConditionClause(name, f"{name} {keyword} ({', '.join(param(v) for v in items)})", args)

    # between
    if not is_sequence(value) or len(value) != 2:
        raise ValidationError(
            f"Operator 'between' on field '{name}' needs a 2-element sequence",
            field=name,
            value=value,
            constraint="pair",
        )
    low, high = list(value)
    return ConditionClause(name, f"{name} BETWEEN {param(low)} AND {param(high)}", args)


def build_conditions(condition: Mapping[str, Any] | None) -> list[ConditionClause]:
    """Render every entry of ``condition``, in mapping order.

    Raises:
        ValidationError: Bad field name, unknown operator, or a value whose
            shape does not fit the operator.
    """
    if condition is None:
        return []
    if not isinstance(condition, Mapping):
        raise ValidationError(
            "Condition must be a mapping of field name to condition spec",
            value=condition,
            constraint="mapping",
        )

    counter = count()
    clauses = []
    for name, spec in condition.items():
        validate_identifier(name)
        exp, value = normalize(spec)
        clauses.append(_render(name, exp, value, counter))
    return clauses


def join_clauses(clauses: Sequence[ConditionClause]) -> tuple[str, dict[str, Any]]:
    """AND-join rendered clauses into one fragment plus merged args."""
    args: dict[str, Any] = {}
    for clause in clauses:
        args.update(clause.args)
    return " AND ".join(c.sql for c in clauses), args


def where_clause(condition: Mapping[str, Any] | None) -> tuple[str, dict[str, Any]]:
    """Shortcut: build and AND-join. Empty condition gives ``('', {})``."""
    return join_clauses(build_conditions(condition))


__all__ = [
    "ConditionClause",
    "OPERATORS",
    "NO_OP_CLAUSE",
    "validate_identifier",
    "normalize",
    "build_conditions",
    "is_sequence",
    "join_clauses",
    "where_clause",
]
