# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for genro-orm.

All errors derive from OrmError. Validation failures derive from
ValidationError and name the offending column(s). Driver errors are
wrapped in StoreFailure at the adapter boundary, with the original
exception kept as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class OrmError(Exception):
    """Base class for all genro-orm errors."""


class NotInitialized(OrmError):
    """Raised when an operation runs before an adapter and dialect are bound."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message or "SqlDb has not been initialized. Call initialize() first."
        )


class UnsupportedType(OrmError):
    """Raised when a dialect has no column type for a Python type."""

    def __init__(self, type_: Any, dialect: str):
        self.type = type_
        self.dialect = dialect
        name = getattr(type_, "__name__", repr(type_))
        super().__init__(f"Type '{name}' is not supported by the {dialect} dialect")


class MissingTableName(OrmError):
    """Raised when neither an explicit nor a declared table name is available."""

    def __init__(self, model: Any):
        self.model = model
        name = getattr(model, "__name__", repr(model))
        super().__init__(
            f"The model {name} must declare a table name or a table name must be specified"
        )


class InvalidModelDeclaration(OrmError):
    """Raised when a model declaration is inconsistent."""

    def __init__(self, model: Any, reason: str):
        self.model = model
        self.reason = reason
        name = getattr(model, "__name__", repr(model))
        super().__init__(f"Invalid declaration for model {name}: {reason}")


class ValidationError(OrmError):
    """Base class for entity validation failures."""


class RequiredFieldMissing(ValidationError):
    """Raised when a required column is None (or blank text)."""

    def __init__(self, column: str, message: str | None = None):
        self.column = column
        super().__init__(message or f"Column '{column}' is required")


class UniqueConstraintViolation(ValidationError):
    """Raised when a unique column value already exists in the table."""

    def __init__(self, column: str, table: str | None = None, message: str | None = None):
        self.column = column
        self.table = table
        where = f" in table '{table}'" if table else ""
        super().__init__(message or f"Column '{column}' must be unique{where}")


class CompositeKeyViolation(ValidationError):
    """Raised when a row with the same composite key values already exists."""

    def __init__(self, columns: tuple[str, ...], table: str | None = None):
        self.columns = tuple(columns)
        self.table = table
        where = f" on table '{table}'" if table else ""
        super().__init__(f"Composite key violation ({', '.join(self.columns)}){where}")


class StoreFailure(OrmError):
    """Raised when the underlying store rejects a statement."""

    def __init__(self, message: str, query: str | None = None):
        self.query = query
        super().__init__(message)


class MultipleRowsFound(OrmError):
    """Raised when a single-row query returns more than one row."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Expected at most one row, got more: {query}")


class TransactionClosed(OrmError):
    """Raised when a transaction handle is used after commit or rollback."""

    def __init__(self) -> None:
        super().__init__("Transaction is closed")


__all__ = [
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
