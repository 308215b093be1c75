"""Model declarations for the CRUD dispatcher.

A model is a pydantic model whose fields are the table's columns, plus
three class-level settings::

    class User(Model):
        table_name = "users"
        primary_key = "id"          # default
        auto_increment = True       # default

        id: int | None = None
        name: str
        status: str = "active"

The connection only needs :class:`ModelMeta` (table, fields, primary key,
auto-increment flag). Callers with metadata from elsewhere can build a
``ModelMeta`` directly and pass it to ``read``/``delete``/``list``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict

from easydb.errors import ConfigError
from easydb.sql.conditions import IDENTIFIER_RE

# Column names double as template placeholder names, so no qualifier
COLUMN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ModelMeta:
    """Table metadata the connection works from."""

    table: str
    fields: tuple[str, ...]
    primary_key: str = "id"
    auto_increment: bool = True

    def __post_init__(self) -> None:
        if not IDENTIFIER_RE.match(self.table):
            raise ConfigError(f"Invalid table name in model metadata: {self.table!r}")
        for name in self.fields:
            if not COLUMN_RE.match(name):
                raise ConfigError(f"Invalid column name in model metadata: {name!r}")
        if self.primary_key not in self.fields:
            raise ConfigError(
                f"Primary key '{self.primary_key}' is not one of the fields of '{self.table}'"
            )

    @property
    def columns(self) -> str:
        return ", ".join(self.fields)


class Model(BaseModel):
    """Base class for table-backed models."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    table_name: ClassVar[str]
    primary_key: ClassVar[str] = "id"
    auto_increment: ClassVar[bool] = True

    @classmethod
    def describe(cls) -> ModelMeta:
        table = getattr(cls, "table_name", None)
        if not table:
            raise ConfigError(f"Model {cls.__name__} does not declare table_name")
        return ModelMeta(
            table=table,
            fields=tuple(cls.model_fields),
            primary_key=cls.primary_key,
            auto_increment=cls.auto_increment,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Model:
        """Build an instance from a result row, ignoring columns that are not fields."""
        return cls.model_validate({k: v for k, v in row.items() if k in cls.model_fields})

    def column_values(self) -> dict[str, Any]:
        """Current field values keyed by column, in declaration order."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    @property
    def pk_value(self) -> Any:
        return getattr(self, type(self).primary_key)


ModelRef = Union[Model, type[Model], ModelMeta]


def describe(model: ModelRef) -> ModelMeta:
    """``ModelMeta`` for a model instance, a model class, or a ``ModelMeta``."""
    if isinstance(model, ModelMeta):
        return model
    if isinstance(model, Model):
        return type(model).describe()
    if isinstance(model, type) and issubclass(model, Model):
        return model.describe()
    raise ConfigError(f"Expected a Model class, instance or ModelMeta, got {type(model).__name__}")


__all__ = [
    "ModelMeta",
    "Model",
    "ModelRef",
    "describe",
]
