# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQL dialects for schema and query generation.

Each dialect maps the primitive column types to SQL types and provides the
syntax fragments used by schema synthesis (primary key, auto-increment,
unique, not null) plus the query returning the last generated id.

Components:
    SqlDialect: Base class; concrete dialects only supply data.
    SqliteDialect, MySqlDialect, PostgresDialect, MsSqlDialect.
    get_dialect: Factory returning a dialect instance by name.

Dialects are always chosen explicitly by the caller; nothing is inferred
from the connection string.

Example::

    dialect = get_dialect("postgresql")
    dialect.map_type(ColumnType.TEXT)   # "TEXT"
    dialect.auto_increment_syntax       # "GENERATED BY DEFAULT AS IDENTITY"
"""

from __future__ import annotations

from .base import SqlDialect
from .mssql import MsSqlDialect
from .mysql import MySqlDialect
from .postgresql import PostgresDialect
from .sqlite import SqliteDialect

__all__ = [
    "SqlDialect",
    "SqliteDialect",
    "MySqlDialect",
    "PostgresDialect",
    "MsSqlDialect",
    "DIALECTS",
    "get_dialect",
]

# Dialect registry
DIALECTS: dict[str, type[SqlDialect]] = {
    "sqlite": SqliteDialect,
    "mysql": MySqlDialect,
    "mariadb": MySqlDialect,
    "postgresql": PostgresDialect,
    "postgres": PostgresDialect,
    "mssql": MsSqlDialect,
    "sqlserver": MsSqlDialect,
}


def get_dialect(dialect: str | SqlDialect) -> SqlDialect:
    """Return a dialect instance by name (instances are returned unchanged).

    Raises:
        ValueError: If the name is not a known dialect.
    """
    if isinstance(dialect, SqlDialect):
        return dialect
    try:
        return DIALECTS[dialect.lower()]()
    except KeyError:
        supported = ", ".join(sorted(DIALECTS))
        raise ValueError(f"Unknown dialect: '{dialect}'. Supported: {supported}") from None
