"""Result types returned by connection operations."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of an INSERT/UPDATE/DELETE.

    ``insert_id`` is only meaningful after an insert into a table with an
    auto-increment key; it is ``0`` otherwise.
    """

    rows_affected: int = 0
    insert_id: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"rowsAffected": self.rows_affected, "insertId": self.insert_id}


@dataclass(frozen=True)
class PageResult:
    """One page of a ``list()`` query plus the totals of the full result."""

    rows: int
    pages: int
    page: int
    rpp: int
    data: list[dict[str, Any]] = field(default_factory=list)

    @property
    def has_more(self) -> bool:
        return self.page < self.pages

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = [
    "UpdateResult",
    "PageResult",
]
