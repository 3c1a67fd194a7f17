# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CREATE TABLE synthesis from a ModelDescriptor and a dialect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import MissingTableName

if TYPE_CHECKING:
    from .column import ForeignKey
    from .dialects import SqlDialect
    from .model import ColumnDescriptor, ModelDescriptor


def resolve_table_name(descriptor: ModelDescriptor, table_name: str | None = None) -> str:
    """Return the explicit table name, else the declared one.

    Raises:
        MissingTableName: If neither is available.
    """
    name = table_name or descriptor.table_name
    if not name:
        raise MissingTableName(descriptor.model)
    return name


def column_sql(col: ColumnDescriptor, dialect: SqlDialect) -> str:
    """Return ``<name> <type>`` followed by pk, auto-increment, unique, not-null."""
    parts = [col.name, dialect.map_type(col.type)]
    if col.primary_key:
        parts.append(dialect.primary_key_syntax)
        if col.auto_increment:
            parts.append(dialect.auto_increment_syntax)
    if col.unique:
        parts.append(dialect.unique_syntax)
    if col.required:
        parts.append(dialect.not_null_syntax)
    return " ".join(p for p in parts if p)


def foreign_key_sql(column: str, fk: ForeignKey) -> str:
    """Return the FOREIGN KEY clause for column referencing fk."""
    sql = f"FOREIGN KEY ({column}) REFERENCES {fk.table}({fk.column})"
    if fk.on_delete:
        sql += f" ON DELETE {fk.on_delete}"
    if fk.on_update:
        sql += f" ON UPDATE {fk.on_update}"
    return sql


def create_table_sql(
    descriptor: ModelDescriptor, dialect: SqlDialect, table_name: str | None = None
) -> str:
    """Generate the idempotent CREATE TABLE statement for a model.

    Clauses are joined in order: column definitions, foreign keys, then the
    composite primary key if declared.

    Raises:
        MissingTableName: If no table name can be resolved.
        UnsupportedType: If a column type has no mapping in the dialect.
    """
    name = resolve_table_name(descriptor, table_name)

    clauses = [column_sql(col, dialect) for col in descriptor.columns]
    clauses.extend(
        foreign_key_sql(col.name, col.foreign_key) for col in descriptor.columns if col.foreign_key
    )
    if descriptor.composite_key:
        clauses.append(f"PRIMARY KEY ({', '.join(descriptor.composite_key)})")

    return dialect.create_table(name, ", ".join(clauses))


__all__ = ["create_table_sql", "resolve_table_name", "column_sql", "foreign_key_sql"]
