# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Async SQL layer: model metadata, dialects, schema synthesis and CRUD.

This package turns plain model declarations into dialect-correct DDL and
parameterized DML, validates entities before writes, and runs batches of
operations in transactions.

Components:
    SqlDb: Engine with model registration, CRUD, ad-hoc queries and
           transaction management.
    Transaction: Handle of one unit of work (pass as ``tx=``).
    ModelRegistry, ModelDescriptor, ColumnDescriptor: Cached model metadata.
    column, table, ForeignKey, Columns: Model declaration helpers.
    SqlDialect, get_dialect: SQLite, MySQL, PostgreSQL, SQL Server dialects.
    DbAdapter, get_adapter: Store adapters (SQLite, PostgreSQL).
    Row: Loosely-typed result row.

Transaction Model:
    - Without ``tx`` every operation runs in its own unit of work
      (acquire, run, COMMIT, release; ROLLBACK on error).
    - transaction(): Context manager yielding a Transaction; COMMIT on
      success, ROLLBACK and re-raise on exception.
    - run_in_transaction(work): Same, for ``async def work(tx)``.

Example:
    Declaring and using a model::

        from dataclasses import dataclass
        from genro_orm.sql import SqlDb, column, table

        @table("users")
        @dataclass
        class User:
            id: int | None = column(primary_key=True)
            name: str = column(required=True, unique=True, default="")
            email: str = column(required=True, default="")

        db = SqlDb("/data/app.db", "sqlite")
        await db.register_model(User)

        user_id = await db.insert("users", User(name="Alice", email="alice@x.com"))

        async with db.transaction() as tx:
            await db.update("users", "id", User(id=user_id, name="Alice", email="new@x.com"), tx=tx)
            await db.delete("users", "id", 42, tx=tx)
        # COMMIT on success, ROLLBACK on exception

        await db.shutdown()
"""

from .adapters import DbAdapter, get_adapter
from .column import (
    Boolean,
    Column,
    Columns,
    ColumnType,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Timestamp,
    column,
    table,
)
from .dialects import DIALECTS, SqlDialect, get_dialect
from .model import ColumnDescriptor, ModelDescriptor, ModelRegistry
from .row import Row
from .schema import create_table_sql
from .sqldb import SqlDb, Transaction
from .validator import Validator

__all__ = [
    # Main classes
    "SqlDb",
    "Transaction",
    "Validator",
    "Row",
    # Model metadata
    "ModelRegistry",
    "ModelDescriptor",
    "ColumnDescriptor",
    "create_table_sql",
    # Declarations
    "column",
    "table",
    "ForeignKey",
    "Column",
    "Columns",
    "ColumnType",
    "Integer",
    "String",
    "Timestamp",
    "Boolean",
    "Float",
    "Numeric",
    # Dialects
    "SqlDialect",
    "DIALECTS",
    "get_dialect",
    # Adapters
    "DbAdapter",
    "get_adapter",
]
