# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for sql.dialects - type tables, syntax fragments and factory."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from genro_orm.errors import UnsupportedType
from genro_orm.sql import DIALECTS, ColumnType, SqlDialect, get_dialect
from genro_orm.sql.dialects import MsSqlDialect, MySqlDialect, PostgresDialect, SqliteDialect

ALL_DIALECTS = [SqliteDialect, MySqlDialect, PostgresDialect, MsSqlDialect]


class TestTypeMapping:
    """Tests for map_type on every dialect."""

    @pytest.mark.parametrize("dialect_class", ALL_DIALECTS)
    def test_every_column_type_is_mapped(self, dialect_class):
        """Every primitive type maps to a non-empty column type."""
        dialect = dialect_class()
        for col_type in ColumnType:
            assert dialect.map_type(col_type)

    @pytest.mark.parametrize("dialect_class", ALL_DIALECTS)
    def test_python_types_map_like_column_types(self, dialect_class):
        """Python primitives map to the same SQL type as their ColumnType."""
        dialect = dialect_class()
        assert dialect.map_type(int) == dialect.map_type(ColumnType.INTEGER)
        assert dialect.map_type(str) == dialect.map_type(ColumnType.TEXT)
        assert dialect.map_type(datetime) == dialect.map_type(ColumnType.TIMESTAMP)
        assert dialect.map_type(bool) == dialect.map_type(ColumnType.BOOLEAN)
        assert dialect.map_type(float) == dialect.map_type(ColumnType.FLOAT)
        assert dialect.map_type(Decimal) == dialect.map_type(ColumnType.DECIMAL)

    @pytest.mark.parametrize("dialect_class", ALL_DIALECTS)
    def test_unsupported_type_raises(self, dialect_class):
        """Types outside the primitive set raise UnsupportedType."""
        dialect = dialect_class()
        with pytest.raises(UnsupportedType) as exc_info:
            dialect.map_type(bytes)
        assert exc_info.value.type is bytes
        assert exc_info.value.dialect == dialect.name

    def test_unhashable_type_raises_unsupported(self):
        """Unhashable values are reported as UnsupportedType, not TypeError."""
        with pytest.raises(UnsupportedType):
            SqliteDialect().map_type([int])

    def test_bool_is_not_integer(self):
        """bool maps to the boolean type even though it subclasses int."""
        assert MySqlDialect().map_type(bool) == "TINYINT(1)"
        assert MsSqlDialect().map_type(bool) == "BIT"

    def test_sqlite_types(self):
        """SQLite type table."""
        d = SqliteDialect()
        assert d.map_type(int) == "INTEGER"
        assert d.map_type(str) == "TEXT"
        assert d.map_type(datetime) == "DATETIME"
        assert d.map_type(float) == "REAL"
        assert d.map_type(Decimal) == "NUMERIC"

    def test_mysql_types(self):
        """MySQL type table."""
        d = MySqlDialect()
        assert d.map_type(int) == "INT"
        assert d.map_type(str) == "VARCHAR(255)"
        assert d.map_type(Decimal) == "DECIMAL(18,2)"

    def test_postgresql_types(self):
        """PostgreSQL type table."""
        d = PostgresDialect()
        assert d.map_type(datetime) == "TIMESTAMP"
        assert d.map_type(float) == "DOUBLE PRECISION"
        assert d.map_type(Decimal) == "NUMERIC(18,2)"

    def test_mssql_types(self):
        """SQL Server type table."""
        d = MsSqlDialect()
        assert d.map_type(str) == "NVARCHAR(MAX)"
        assert d.map_type(int) == "INT"


class TestSyntaxFragments:
    """Tests for dialect syntax fragments and last-id queries."""

    def test_auto_increment_syntax(self):
        """Each dialect has its own auto-increment fragment."""
        assert SqliteDialect.auto_increment_syntax == "AUTOINCREMENT"
        assert MySqlDialect.auto_increment_syntax == "AUTO_INCREMENT"
        assert PostgresDialect.auto_increment_syntax == "GENERATED BY DEFAULT AS IDENTITY"
        assert MsSqlDialect.auto_increment_syntax == "IDENTITY(1,1)"

    @pytest.mark.parametrize("dialect_class", ALL_DIALECTS)
    def test_common_fragments(self, dialect_class):
        """Primary key, unique and not-null fragments are standard SQL."""
        assert dialect_class.primary_key_syntax == "PRIMARY KEY"
        assert dialect_class.unique_syntax == "UNIQUE"
        assert dialect_class.not_null_syntax == "NOT NULL"

    def test_last_insert_id_queries(self):
        """Each dialect reads the generated id with its own query."""
        assert SqliteDialect().last_insert_id_query("t", "id") == "SELECT last_insert_rowid()"
        assert MySqlDialect().last_insert_id_query("t", "id") == "SELECT LAST_INSERT_ID()"
        assert MsSqlDialect().last_insert_id_query("t", "id") == "SELECT @@IDENTITY"

    def test_postgresql_last_id_is_scoped_to_table(self):
        """PostgreSQL reads the sequence owned by the table's key column."""
        assert PostgresDialect().last_insert_id_query("users", "id") == (
            "SELECT currval(pg_get_serial_sequence('users', 'id'))"
        )

    def test_create_table_is_idempotent_form(self):
        """Default create statement uses IF NOT EXISTS."""
        sql = PostgresDialect().create_table("items", "id INTEGER")
        assert sql == "CREATE TABLE IF NOT EXISTS items (id INTEGER);"

    def test_mssql_create_table_guard(self):
        """SQL Server guards creation with OBJECT_ID."""
        sql = MsSqlDialect().create_table("items", "id INT")
        assert sql == "IF OBJECT_ID(N'items', N'U') IS NULL CREATE TABLE items (id INT);"


class TestGetDialect:
    """Tests for get_dialect factory function."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("sqlite", SqliteDialect),
            ("mysql", MySqlDialect),
            ("mariadb", MySqlDialect),
            ("postgresql", PostgresDialect),
            ("postgres", PostgresDialect),
            ("mssql", MsSqlDialect),
            ("sqlserver", MsSqlDialect),
        ],
    )
    def test_known_names(self, name, expected):
        """Registered names return the matching dialect."""
        assert isinstance(get_dialect(name), expected)

    def test_name_is_case_insensitive(self):
        """Dialect names are matched case-insensitively."""
        assert isinstance(get_dialect("PostgreSQL"), PostgresDialect)

    def test_instance_is_returned_unchanged(self):
        """Passing a dialect instance returns it as-is."""
        dialect = SqliteDialect()
        assert get_dialect(dialect) is dialect

    def test_unknown_name_raises(self):
        """Unknown dialect names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown dialect"):
            get_dialect("oracle")

    def test_registry_contains_only_dialects(self):
        """DIALECTS maps names to SqlDialect subclasses."""
        for dialect_class in DIALECTS.values():
            assert issubclass(dialect_class, SqlDialect)
