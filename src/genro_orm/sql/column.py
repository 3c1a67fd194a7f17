# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Column declarations: primitive types, field helpers, and a Columns builder.

Two ways to declare a model:

1. A dataclass whose fields use column() and a @table decorator::

        @table("users")
        @dataclass
        class User:
            id: int | None = column(primary_key=True)
            name: str = column(required=True, unique=True, default="")
            email: str = column(required=True, default="")

2. An explicit Columns builder, registered without introspection::

        c = Columns()
        c.column("id", Integer, primary_key=True)
        c.column("name", String, required=True, unique=True)
        c.column("team_id", Integer).references("teams", "id", on_delete="CASCADE")
        registry.register(User, c.descriptor(User, table_name="users"))
"""

from __future__ import annotations

import dataclasses
from dataclasses import MISSING, dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from .model import ModelDescriptor

# Key under which column() stores its ColumnInfo in dataclass field metadata
COLUMN_METADATA = "genro_orm"

TABLE_NAME_ATTR = "__table_name__"
COMPOSITE_KEY_ATTR = "__composite_key__"


class ColumnType(str, Enum):
    """Primitive semantic types understood by every dialect."""

    INTEGER = "integer"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DECIMAL = "decimal"


# Short aliases for builder declarations
Integer = ColumnType.INTEGER
String = ColumnType.TEXT
Timestamp = ColumnType.TIMESTAMP
Boolean = ColumnType.BOOLEAN
Float = ColumnType.FLOAT
Numeric = ColumnType.DECIMAL

# Exact-type lookup: bool must not fall through to int
PYTHON_TYPES: dict[type, ColumnType] = {
    int: ColumnType.INTEGER,
    str: ColumnType.TEXT,
    datetime: ColumnType.TIMESTAMP,
    bool: ColumnType.BOOLEAN,
    float: ColumnType.FLOAT,
    Decimal: ColumnType.DECIMAL,
}

COLUMN_PYTHON_TYPES: dict[ColumnType, type] = {v: k for k, v in PYTHON_TYPES.items()}


def column_type_for(py_type: Any) -> ColumnType | Any:
    """Return the ColumnType for a Python type, or the type itself if unknown."""
    if isinstance(py_type, ColumnType):
        return py_type
    return PYTHON_TYPES.get(py_type, py_type)


@dataclass(frozen=True)
class ForeignKey:
    """Reference from a column to a column of another table."""

    table: str
    column: str = "id"
    on_delete: str | None = None
    on_update: str | None = None


@dataclass(frozen=True)
class ColumnInfo:
    """Role flags attached to a dataclass field by column()."""

    primary_key: bool = False
    auto_increment: bool = True
    required: bool = False
    unique: bool = False
    foreign_key: ForeignKey | None = None
    message: str | None = None


def column(
    *,
    primary_key: bool = False,
    auto_increment: bool = True,
    required: bool = False,
    unique: bool = False,
    foreign_key: ForeignKey | None = None,
    message: str | None = None,
    default: Any = MISSING,
    default_factory: Callable[[], Any] | Any = MISSING,
) -> Any:
    """Declare a dataclass field as a table column.

    auto_increment only applies to primary keys. An auto-increment primary
    key defaults to None so entities can be built before insert. message
    replaces the default text of a required or unique validation error.
    """
    info = ColumnInfo(
        primary_key=primary_key,
        auto_increment=auto_increment,
        required=required,
        unique=unique,
        foreign_key=foreign_key,
        message=message,
    )
    if primary_key and auto_increment and default is MISSING and default_factory is MISSING:
        default = None

    kwargs: dict[str, Any] = {"metadata": {COLUMN_METADATA: info}}
    if default is not MISSING:
        kwargs["default"] = default
    if default_factory is not MISSING:
        kwargs["default_factory"] = default_factory
    return dataclasses.field(**kwargs)


def table(name: str | None = None, *, composite_key: tuple[str, ...] | list[str] | None = None):
    """Class decorator setting the table name and optional composite key."""
    if composite_key is not None and len(composite_key) == 0:
        raise ValueError("At least one column must be specified for a composite key")

    def decorate(cls: type) -> type:
        if name is not None:
            setattr(cls, TABLE_NAME_ATTR, name)
        if composite_key is not None:
            setattr(cls, COMPOSITE_KEY_ATTR, tuple(composite_key))
        return cls

    return decorate


class Column:
    """Builder-side column definition."""

    def __init__(
        self,
        name: str,
        type_: ColumnType | type,
        primary_key: bool = False,
        auto_increment: bool = True,
        required: bool = False,
        unique: bool = False,
        message: str | None = None,
    ):
        self.name = name
        self.type_ = column_type_for(type_)
        self.primary_key = primary_key
        self.auto_increment = auto_increment
        self.required = required
        self.unique = unique
        self.message = message
        self.foreign_key: ForeignKey | None = None

    def references(
        self,
        table: str,
        column: str = "id",
        on_delete: str | None = None,
        on_update: str | None = None,
    ) -> Column:
        """Attach a foreign key reference. Returns self for chaining."""
        self.foreign_key = ForeignKey(table, column, on_delete, on_update)
        return self

    def __repr__(self) -> str:
        return f"Column({self.name!r}, {self.type_!r})"


class Columns(dict[str, Column]):
    """Ordered column collection with a fluent column() method."""

    def __init__(self) -> None:
        super().__init__()
        self.composite: tuple[str, ...] | None = None

    def column(self, name: str, type_: ColumnType | type, **kwargs: Any) -> Column:
        """Add a column and return it (for .references() chaining)."""
        if name in self:
            raise ValueError(f"Column '{name}' already defined")
        col = Column(name, type_, **kwargs)
        self[name] = col
        return col

    def composite_key(self, *names: str) -> Columns:
        """Declare a table-level composite primary key."""
        if not names:
            raise ValueError("At least one column must be specified for a composite key")
        self.composite = tuple(names)
        return self

    def descriptor(self, model: Any = None, table_name: str | None = None) -> ModelDescriptor:
        """Build an immutable ModelDescriptor from the declared columns."""
        from .model import ColumnDescriptor, ModelDescriptor

        return ModelDescriptor.build(
            model,
            tuple(
                ColumnDescriptor(
                    name=c.name,
                    type=c.type_,
                    primary_key=c.primary_key,
                    auto_increment=c.primary_key and c.auto_increment,
                    unique=c.unique,
                    required=c.required,
                    foreign_key=c.foreign_key,
                    message=c.message,
                )
                for c in self.values()
            ),
            composite_key=self.composite,
            table_name=table_name,
        )


__all__ = [
    "ColumnType",
    "Integer",
    "String",
    "Timestamp",
    "Boolean",
    "Float",
    "Numeric",
    "ForeignKey",
    "ColumnInfo",
    "column",
    "table",
    "Column",
    "Columns",
    "column_type_for",
    "COLUMN_PYTHON_TYPES",
]
