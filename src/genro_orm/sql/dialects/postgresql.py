# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""PostgreSQL dialect."""

from __future__ import annotations

from ..column import ColumnType
from .base import SqlDialect


class PostgresDialect(SqlDialect):
    """PostgreSQL: identity columns, the last id is read from the table's own sequence.

    The identity clause follows the type (``id INTEGER PRIMARY KEY GENERATED
    BY DEFAULT AS IDENTITY``); SERIAL would have to replace the type instead.
    """

    name = "postgresql"
    type_map = {
        ColumnType.INTEGER: "INTEGER",
        ColumnType.TEXT: "TEXT",
        ColumnType.TIMESTAMP: "TIMESTAMP",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.FLOAT: "DOUBLE PRECISION",
        ColumnType.DECIMAL: "NUMERIC(18,2)",
    }
    auto_increment_syntax = "GENERATED BY DEFAULT AS IDENTITY"

    def last_insert_id_query(self, table_name: str, pk_column: str) -> str:
        """Read currval() of the identity sequence owned by table_name.pk_column."""
        return f"SELECT currval(pg_get_serial_sequence('{table_name}', '{pk_column}'))"
