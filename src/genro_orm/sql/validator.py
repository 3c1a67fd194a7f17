# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pre-write validation of entities against model constraints.

Checks run against committed store state and stop at the first failure:

1. Composite key: one COUNT(*) across all key columns.
2. Per column, in declaration order: required, then unique (COUNT(*)).

The checks are an early rejection, not a guarantee: two concurrent writers
can both pass the unique check. The UNIQUE/PRIMARY KEY constraints emitted
in the schema remain the authoritative enforcement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import CompositeKeyViolation, RequiredFieldMissing, UniqueConstraintViolation
from .column import ColumnType

if TYPE_CHECKING:
    from .model import ColumnDescriptor, ModelDescriptor
    from .sqldb import SqlDb, Transaction


def is_missing(col: ColumnDescriptor, value: Any) -> bool:
    """True if value does not satisfy a required column."""
    if value is None:
        return True
    return col.type == ColumnType.TEXT and isinstance(value, str) and not value.strip()


class Validator:
    """Validates entities for one SqlDb."""

    def __init__(self, db: SqlDb):
        self.db = db

    async def validate(
        self,
        descriptor: ModelDescriptor,
        entity: Any,
        table: str,
        tx: Transaction | None = None,
    ) -> None:
        """Raise the first ValidationError found for entity, return None if valid.

        Raises:
            CompositeKeyViolation: A row already has the same composite key values.
            RequiredFieldMissing: A required column is None or blank text.
            UniqueConstraintViolation: A unique column value already exists.
        """
        values = descriptor.values(entity)

        if descriptor.composite_key:
            key = descriptor.composite_key
            conditions = " AND ".join(f"{name} = :{name}" for name in key)
            params = {name: values.get(name) for name in key}
            if await self._count(table, conditions, params, tx) > 0:
                raise CompositeKeyViolation(key, table)

        for col in descriptor.columns:
            value = values[col.name]
            if col.required and is_missing(col, value):
                raise RequiredFieldMissing(col.name, col.message)
            if col.unique:
                count = await self._count(table, f"{col.name} = :value", {"value": value}, tx)
                if count > 0:
                    raise UniqueConstraintViolation(col.name, table, col.message)

    async def _count(
        self, table: str, conditions: str, params: dict[str, Any], tx: Transaction | None
    ) -> int:
        query = f"SELECT COUNT(*) FROM {table} WHERE {conditions}"
        result = await self.db.scalar(query, params, tx=tx)
        return int(result or 0)


__all__ = ["Validator", "is_missing"]
