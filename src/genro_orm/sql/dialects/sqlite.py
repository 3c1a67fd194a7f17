# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite dialect."""

from __future__ import annotations

from ..column import ColumnType
from .base import SqlDialect


class SqliteDialect(SqlDialect):
    """SQLite: last_insert_rowid() is scoped to the connection."""

    name = "sqlite"
    type_map = {
        ColumnType.INTEGER: "INTEGER",
        ColumnType.TEXT: "TEXT",
        ColumnType.TIMESTAMP: "DATETIME",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.FLOAT: "REAL",
        ColumnType.DECIMAL: "NUMERIC",
    }
    auto_increment_syntax = "AUTOINCREMENT"
    last_insert_id_sql = "SELECT last_insert_rowid()"
