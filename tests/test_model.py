"""Tests for ``easydb.model`` and ``easydb.result``."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from easydb import Model, ModelMeta, PageResult, UpdateResult
from easydb.errors import ConfigError
from easydb.model import describe
from tests._support import Tag, User


class TestModelMeta:
    def test_describe_user(self):
        meta = User.describe()
        assert meta == ModelMeta(
            table="users",
            fields=("id", "name", "email", "status", "age"),
            primary_key="id",
            auto_increment=True,
        )
        assert meta.columns == "id, name, email, status, age"

    def test_natural_key(self):
        meta = Tag.describe()
        assert meta.primary_key == "slug"
        assert meta.auto_increment is False

    def test_describe_accepts_instance_class_and_meta(self):
        meta = User.describe()
        assert describe(User) == meta
        assert describe(User(name="a")) == meta
        assert describe(meta) is meta

    def test_describe_rejects_other(self):
        with pytest.raises(ConfigError):
            describe("users")

    def test_primary_key_must_be_a_field(self):
        with pytest.raises(ConfigError, match="Primary key"):
            ModelMeta(table="t", fields=("a",), primary_key="id")

    @pytest.mark.parametrize("table", ["users; DROP", "1t", ""])
    def test_bad_table(self, table):
        with pytest.raises(ConfigError, match="table"):
            ModelMeta(table=table, fields=("id",))

    def test_qualified_table_allowed(self):
        assert ModelMeta(table="app.users", fields=("id",)).table == "app.users"

    def test_bad_column(self):
        with pytest.raises(ConfigError, match="column"):
            ModelMeta(table="t", fields=("id", "a.b"))

    def test_missing_table_name(self):
        class Orphan(Model):
            id: int | None = None

        with pytest.raises(ConfigError, match="table_name"):
            Orphan.describe()


class TestModel:
    def test_from_row_ignores_extra_columns(self):
        user = User.from_row({"id": 1, "name": "a", "status": "active", "total": 9})
        assert user.id == 1
        assert user.name == "a"

    def test_column_values_in_declaration_order(self):
        values = User(id=3, name="a").column_values()
        assert list(values) == ["id", "name", "email", "status", "age"]

    def test_pk_value(self):
        assert User(id=7, name="a").pk_value == 7
        assert Tag(slug="py", label="Python").pk_value == "py"

    def test_validate_assignment(self):
        user = User(name="a")
        with pytest.raises(PydanticValidationError):
            user.age = "not a number"

    def test_extra_fields_forbidden(self):
        with pytest.raises(PydanticValidationError):
            User(name="a", nickname="b")


class TestResults:
    def test_update_result_defaults(self):
        assert UpdateResult() == UpdateResult(rows_affected=0, insert_id=0)

    def test_update_result_to_dict(self):
        assert UpdateResult(2, 9).to_dict() == {"rowsAffected": 2, "insertId": 9}

    def test_page_result_has_more(self):
        assert PageResult(rows=25, pages=3, page=2, rpp=10).has_more is True
        assert PageResult(rows=25, pages=3, page=3, rpp=10).has_more is False

    def test_page_result_to_dict(self):
        page = PageResult(rows=1, pages=1, page=1, rpp=10, data=[{"id": 1}])
        assert page.to_dict() == {"rows": 1, "pages": 1, "page": 1, "rpp": 10, "data": [{"id": 1}]}
