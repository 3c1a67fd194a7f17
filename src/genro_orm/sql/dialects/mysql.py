# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""MySQL / MariaDB dialect."""

from __future__ import annotations

from ..column import ColumnType
from .base import SqlDialect


class MySqlDialect(SqlDialect):
    """MySQL: LAST_INSERT_ID() is maintained per connection."""

    name = "mysql"
    type_map = {
        ColumnType.INTEGER: "INT",
        ColumnType.TEXT: "VARCHAR(255)",
        ColumnType.TIMESTAMP: "DATETIME",
        ColumnType.BOOLEAN: "TINYINT(1)",
        ColumnType.FLOAT: "DOUBLE",
        ColumnType.DECIMAL: "DECIMAL(18,2)",
    }
    auto_increment_syntax = "AUTO_INCREMENT"
    last_insert_id_sql = "SELECT LAST_INSERT_ID()"
