"""ORDER BY formatter.

Tokens are ``"field DIRECTION"`` strings; direction is ASC or DESC
(case-insensitive, rendered uppercase). An empty sequence renders no
ORDER BY clause, so row order is whatever the backend returns.
"""

from __future__ import annotations

from collections.abc import Sequence

from easydb.errors import ValidationError
from easydb.sql.conditions import validate_identifier

DIRECTIONS = frozenset({"ASC", "DESC"})


def parse_token(token: str) -> tuple[str, str]:
    """Split one ``"field DIRECTION"`` token into ``(field, DIRECTION)``."""
    if not isinstance(token, str):
        raise ValidationError(f"Order-by token must be a string, got {token!r}", value=token, constraint="string")
    parts = token.split()
    if len(parts) != 2:
        raise ValidationError(
            f"Order-by token must be 'field DIRECTION', got {token!r}",
            value=token,
            constraint="field DIRECTION",
        )
    name, direction = parts
    validate_identifier(name)
    direction = direction.upper()
    if direction not in DIRECTIONS:
        raise ValidationError(
            f"Unknown sort direction {parts[1]!r} in {token!r}",
            field=name,
            value=parts[1],
            constraint="ASC|DESC",
        )
    return name, direction


def format_order_by(tokens: Sequence[str] | None) -> str:
    """Render ``tokens`` as `` ORDER BY ...`` (leading space), or ``''`` when empty."""
    if not tokens:
        return ""
    if isinstance(tokens, str):
        tokens = [tokens]
    rendered = [" ".join(parse_token(t)) for t in tokens]
    return " ORDER BY " + ", ".join(rendered)


__all__ = [
    "DIRECTIONS",
    "parse_token",
    "format_order_by",
]
