"""Pagination calculator for ``list()``.

``Paginator`` owns the default page size (injected from configuration)
and turns a page request into offset/limit; ``page_count`` turns the
row total into a page total.

Examples:
    >>> p = Paginator(default_rpp=10).resolve({"page": 3})
    >>> p.offset, p.limit
    (20, 10)
    >>> page_count(25, 10)
    3
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from easydb.errors import ConfigError, ValidationError


@dataclass(frozen=True)
class Pagination:
    """A validated page request."""

    page: int
    rpp: int

    def __post_init__(self) -> None:
        for name in ("page", "rpp"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(
                    f"Pagination '{name}' must be an integer",
                    field=name,
                    value=value,
                    constraint="integer",
                )
        if self.page < 1:
            raise ValidationError("Pagination 'page' must be >= 1", field="page", value=self.page, constraint=">=1")
        if self.rpp <= 0:
            raise ValidationError("Pagination 'rpp' must be > 0", field="rpp", value=self.rpp, constraint=">0")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.rpp

    @property
    def limit(self) -> int:
        return self.rpp


def page_count(rows: int, rpp: int) -> int:
    """Number of pages needed for ``rows`` rows; 0 when there are none."""
    if rows <= 0:
        return 0
    return -(-rows // rpp)


class Paginator:
    """Resolves page requests against a configured default page size."""

    def __init__(self, default_rpp: int):
        if isinstance(default_rpp, bool) or not isinstance(default_rpp, int) or default_rpp <= 0:
            raise ConfigError(f"default_rpp must be a positive integer, got {default_rpp!r}")
        self.default_rpp = default_rpp

    def resolve(self, pagination: Pagination | Mapping[str, Any] | None) -> Pagination:
        """Apply defaults to a request given as ``Pagination``, a mapping, or ``None``.

        Raises:
            ValidationError: ``page < 1``, ``rpp <= 0``, non-integers, or an
                unsupported request type.
        """
        if pagination is None:
            return Pagination(page=1, rpp=self.default_rpp)
        if isinstance(pagination, Pagination):
            return pagination
        if isinstance(pagination, Mapping):
            return Pagination(
                page=pagination.get("page", 1),
                rpp=pagination.get("rpp", self.default_rpp),
            )
        raise ValidationError(
            f"Pagination must be a mapping with 'page'/'rpp', got {type(pagination).__name__}",
            value=pagination,
            constraint="mapping",
        )


__all__ = [
    "Pagination",
    "Paginator",
    "page_count",
]
