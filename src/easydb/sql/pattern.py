"""Condition pattern assembler.

A condition pattern is a caller-written WHERE skeleton with one slot per
optional filter::

    AND ($pluginName$ OR $pluginVersion$) AND $jsonTest$

Each ``$field$`` slot is replaced by the rendered clause for that field
when the condition has it, and by ``1 = 1`` when it does not.  The SQL
text keeps the same structure whichever filters are active; the planner
drops the ``1 = 1`` terms.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from easydb.errors import ValidationError
from easydb.sql.conditions import NO_OP_CLAUSE, ConditionClause

PATTERN_PREFIX = "AND "

_SLOT_RE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?)\$")


def pattern_slots(pattern: str) -> list[str]:
    """Validate ``pattern`` and return its slot names in order.

    Raises:
        ValidationError: Pattern does not start with ``AND `` or contains a
            ``$`` that is not part of a well-formed ``$name$`` slot.
    """
    if not isinstance(pattern, str) or not pattern.lstrip().startswith(PATTERN_PREFIX):
        raise ValidationError(
            f"Condition pattern must start with '{PATTERN_PREFIX}'",
            value=pattern,
            constraint="prefix",
        )
    leftover = _SLOT_RE.sub("", pattern)
    if "$" in leftover:
        raise ValidationError(
            "Condition pattern contains a malformed '$name$' slot",
            value=pattern,
            constraint="slot",
        )
    return _SLOT_RE.findall(pattern)


def assemble(pattern: str, clauses: Sequence[ConditionClause]) -> tuple[str, dict[str, Any]]:
    """Fill the slots of ``pattern`` from ``clauses``.

    Returns the assembled fragment (still starting with ``AND ``) and the
    merged template args of the clauses used.

    Raises:
        ValidationError: Malformed pattern, or a clause whose field has no
            slot in the pattern (the filter would be dropped silently).
    """
    slots = pattern_slots(pattern)
    by_field = {c.field: c for c in clauses}

    unreferenced = [name for name in by_field if name not in slots]
    if unreferenced:
        raise ValidationError(
            f"Condition field(s) {unreferenced} have no slot in the condition pattern",
            field=unreferenced[0],
            value=pattern,
            constraint="unreferenced",
        )

    args: dict[str, Any] = {}

    def fill(match: re.Match[str]) -> str:
        clause = by_field.get(match.group(1))
        if clause is None:
            return NO_OP_CLAUSE
        args.update(clause.args)
        return clause.sql

    return _SLOT_RE.sub(fill, pattern.lstrip()), args


__all__ = [
    "PATTERN_PREFIX",
    "pattern_slots",
    "assemble",
]
