# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for sql.validator - required, unique and composite-key checks."""

from __future__ import annotations

import pytest
from orm_models import Account, Enrollment, Grant, User

from genro_orm.errors import (
    CompositeKeyViolation,
    RequiredFieldMissing,
    UniqueConstraintViolation,
    ValidationError,
)
from genro_orm.sql.column import ColumnType
from genro_orm.sql.model import ColumnDescriptor
from genro_orm.sql.validator import is_missing


class TestIsMissing:
    """Tests for the required-value predicate."""

    def test_none_is_missing(self):
        assert is_missing(ColumnDescriptor("n", ColumnType.INTEGER), None)

    def test_blank_text_is_missing(self):
        col = ColumnDescriptor("n", ColumnType.TEXT)
        assert is_missing(col, "")
        assert is_missing(col, "   ")
        assert not is_missing(col, "x")

    def test_zero_is_present(self):
        assert not is_missing(ColumnDescriptor("n", ColumnType.INTEGER), 0)
        assert not is_missing(ColumnDescriptor("b", ColumnType.BOOLEAN), False)


class TestValidate:
    """Tests for SqlDb.validate against stored rows."""

    @pytest.fixture
    async def db(self, sqlite_db):
        await sqlite_db.register_model(User)
        await sqlite_db.register_model(Grant)
        await sqlite_db.register_model(Enrollment)
        await sqlite_db.register_model(Account)
        return sqlite_db

    async def test_valid_entity_passes(self, db):
        assert await db.validate(User(name="Alice", email="a@x.com")) is None

    async def test_required_none(self, db):
        with pytest.raises(RequiredFieldMissing) as exc_info:
            await db.validate(User(name=None, email="a@x.com"))
        assert exc_info.value.column == "name"

    async def test_required_blank(self, db):
        with pytest.raises(RequiredFieldMissing) as exc_info:
            await db.validate(User(name="Alice", email="  "))
        assert exc_info.value.column == "email"

    async def test_unique_violation(self, db):
        await db.insert("users", User(name="Alice", email="a@x.com"))
        with pytest.raises(UniqueConstraintViolation) as exc_info:
            await db.validate(User(name="Alice", email="other@x.com"))
        assert exc_info.value.column == "name"
        assert exc_info.value.table == "users"

    async def test_first_failure_in_column_order(self, db):
        """Only the first failing column is reported."""
        await db.insert("users", User(name="Alice", email="a@x.com"))
        with pytest.raises(UniqueConstraintViolation) as exc_info:
            await db.validate(User(name="Alice", email=""))
        assert exc_info.value.column == "name"

    async def test_composite_key_violation(self, db):
        await db.insert("grants", Grant(user_id=1, role="admin"))
        with pytest.raises(CompositeKeyViolation) as exc_info:
            await db.validate(Grant(user_id=1, role="admin", note="again"))
        assert exc_info.value.columns == ("user_id", "role")

    async def test_composite_key_other_values_pass(self, db):
        await db.insert("grants", Grant(user_id=1, role="admin"))
        await db.validate(Grant(user_id=1, role="reader"))
        await db.validate(Grant(user_id=2, role="admin"))

    async def test_explicit_table(self, db):
        """Validation can target a table other than the declared one."""
        await db.register_model(User, "archived_users")
        await db.insert("users", User(name="Alice", email="a@x.com"))
        await db.validate(User(name="Alice", email="a@x.com"), table="archived_users")

    async def test_errors_share_base_class(self, db):
        with pytest.raises(ValidationError):
            await db.validate(User(name="", email=""))

    async def test_composite_key_checked_before_required(self, db):
        """A duplicate composite key is reported even if a required column is blank."""
        await db.insert("enrollments", Enrollment(student="ann", course="math", grade="A"))
        with pytest.raises(CompositeKeyViolation):
            await db.validate(Enrollment(student="ann", course="math", grade=""))


class TestDeclaredMessages:
    """Tests for validation messages declared on columns."""

    @pytest.fixture
    async def db(self, sqlite_db):
        await sqlite_db.register_model(Enrollment)
        await sqlite_db.register_model(Account)
        return sqlite_db

    async def test_required_message(self, db):
        with pytest.raises(RequiredFieldMissing, match="A grade is mandatory") as exc_info:
            await db.validate(Enrollment(student="ann", course="math", grade=" "))
        assert exc_info.value.column == "grade"

    async def test_unique_message(self, db):
        await db.insert("accounts", Account(login="bob"))
        with pytest.raises(UniqueConstraintViolation) as exc_info:
            await db.validate(Account(login="bob"))
        assert str(exc_info.value) == "Login already taken"
        assert exc_info.value.table == "accounts"

    async def test_default_message_without_declaration(self, db):
        with pytest.raises(RequiredFieldMissing) as exc_info:
            await db.validate(Enrollment(student="", course="math", grade="A"))
        assert str(exc_info.value) == "Column 'student' is required"
