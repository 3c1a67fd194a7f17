# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Microsoft SQL Server dialect."""

from __future__ import annotations

from ..column import ColumnType
from .base import SqlDialect


class MsSqlDialect(SqlDialect):
    """SQL Server: IDENTITY columns, @@IDENTITY is scoped to the session.

    SCOPE_IDENTITY() is not used: it returns NULL when queried in a batch
    separate from the INSERT.
    """

    name = "mssql"
    type_map = {
        ColumnType.INTEGER: "INT",
        ColumnType.TEXT: "NVARCHAR(MAX)",
        ColumnType.TIMESTAMP: "DATETIME",
        ColumnType.BOOLEAN: "BIT",
        ColumnType.FLOAT: "FLOAT",
        ColumnType.DECIMAL: "DECIMAL(18,2)",
    }
    auto_increment_syntax = "IDENTITY(1,1)"
    last_insert_id_sql = "SELECT @@IDENTITY"

    def create_table(self, table_name: str, body: str) -> str:
        """SQL Server has no CREATE TABLE IF NOT EXISTS: guard with OBJECT_ID."""
        return (
            f"IF OBJECT_ID(N'{table_name}', N'U') IS NULL "
            f"CREATE TABLE {table_name} ({body});"
        )
