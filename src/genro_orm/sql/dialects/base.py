# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base class for SQL dialects: type table and syntax fragments."""

from __future__ import annotations

from typing import Any, ClassVar

from ...errors import UnsupportedType
from ..column import ColumnType, column_type_for


class SqlDialect:
    """Stateless strategy translating column metadata into one store's SQL.

    Concrete dialects are data only: they fill ``type_map`` and the syntax
    attributes. map_type() is total over ColumnType and raises
    UnsupportedType for anything else.

    Attributes:
        name: Registry name of the dialect ("sqlite", "postgresql", ...).
        type_map: ColumnType -> column type string.
        primary_key_syntax: Fragment marking a primary key column.
        auto_increment_syntax: Fragment appended after the primary key fragment.
        unique_syntax: Fragment marking a unique column.
        not_null_syntax: Fragment marking a required column.
        last_insert_id_sql: Session-scoped query for the last generated id.
    """

    name: ClassVar[str] = ""
    type_map: ClassVar[dict[ColumnType, str]] = {}

    primary_key_syntax: ClassVar[str] = "PRIMARY KEY"
    auto_increment_syntax: ClassVar[str] = ""
    unique_syntax: ClassVar[str] = "UNIQUE"
    not_null_syntax: ClassVar[str] = "NOT NULL"
    last_insert_id_sql: ClassVar[str] = ""

    def map_type(self, type_: ColumnType | Any) -> str:
        """Return the column type for a ColumnType (or a Python primitive type).

        Raises:
            UnsupportedType: If the type has no entry in this dialect's table.
        """
        try:
            sql_type = self.type_map[column_type_for(type_)]
        except (KeyError, TypeError):
            raise UnsupportedType(type_, self.name) from None
        return sql_type

    def last_insert_id_query(self, table_name: str, pk_column: str) -> str:
        """Return the query fetching the id generated by the last insert into table_name."""
        return self.last_insert_id_sql

    def create_table(self, table_name: str, body: str) -> str:
        """Wrap column/constraint clauses in an idempotent CREATE TABLE."""
        return f"CREATE TABLE IF NOT EXISTS {table_name} ({body});"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
