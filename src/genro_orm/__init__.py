# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""genro-orm: minimal async ORM with dialect-agnostic schema and query synthesis."""

from .config import OrmConfig
from .errors import (
    CompositeKeyViolation,
    InvalidModelDeclaration,
    MissingTableName,
    MultipleRowsFound,
    NotInitialized,
    OrmError,
    RequiredFieldMissing,
    StoreFailure,
    TransactionClosed,
    UniqueConstraintViolation,
    UnsupportedType,
    ValidationError,
)
from .sql import ForeignKey, Row, SqlDb, Transaction, column, get_dialect, table

__version__ = "0.1.0"

__all__ = [
    "OrmConfig",
    "SqlDb",
    "Transaction",
    "Row",
    "column",
    "table",
    "ForeignKey",
    "get_dialect",
    "OrmError",
    "NotInitialized",
    "UnsupportedType",
    "MissingTableName",
    "InvalidModelDeclaration",
    "ValidationError",
    "RequiredFieldMissing",
    "UniqueConstraintViolation",
    "CompositeKeyViolation",
    "StoreFailure",
    "MultipleRowsFound",
    "TransactionClosed",
]
