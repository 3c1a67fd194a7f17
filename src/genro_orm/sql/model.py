# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Model descriptors and the registry that caches them per model type.

A ModelDescriptor is the structural view of a model: ordered columns with
their role flags, an optional composite key and an optional table name.
It is built once per type by ModelRegistry.resolve() and never mutated.

Unsupported Python field types are kept as-is on the descriptor; they only
fail when a dialect is asked to map them (schema synthesis).
"""

from __future__ import annotations

import dataclasses
import threading
import types
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

from ..errors import InvalidModelDeclaration
from .column import (
    COLUMN_METADATA,
    COMPOSITE_KEY_ATTR,
    TABLE_NAME_ATTR,
    ColumnInfo,
    ColumnType,
    ForeignKey,
    column_type_for,
)


@dataclass(frozen=True)
class ColumnDescriptor:
    """One column of a model: name, primitive type and role flags."""

    name: str
    type: ColumnType | Any
    primary_key: bool = False
    auto_increment: bool = False
    unique: bool = False
    required: bool = False
    foreign_key: ForeignKey | None = None
    message: str | None = None

    @property
    def is_generated(self) -> bool:
        """True for auto-increment primary keys (value assigned by the store)."""
        return self.primary_key and self.auto_increment


@dataclass(frozen=True)
class ModelDescriptor:
    """Immutable structural metadata of a model type."""

    model: Any
    columns: tuple[ColumnDescriptor, ...]
    composite_key: tuple[str, ...] | None = None
    table_name: str | None = None

    @classmethod
    def build(
        cls,
        model: Any,
        columns: tuple[ColumnDescriptor, ...],
        composite_key: tuple[str, ...] | None = None,
        table_name: str | None = None,
    ) -> ModelDescriptor:
        """Create a descriptor after checking declaration consistency.

        Raises:
            InvalidModelDeclaration: On duplicate column names, a composite key
                naming unknown columns, or an auto-increment primary key
                declared together with a composite key.
        """
        seen: set[str] = set()
        for col in columns:
            if col.name in seen:
                raise InvalidModelDeclaration(model, f"duplicate column '{col.name}'")
            seen.add(col.name)

        if composite_key is not None:
            if not composite_key:
                raise InvalidModelDeclaration(model, "empty composite key")
            unknown = [name for name in composite_key if name not in seen]
            if unknown:
                raise InvalidModelDeclaration(
                    model, f"composite key references unknown column(s) {', '.join(unknown)}"
                )
            generated = [col.name for col in columns if col.is_generated]
            if generated:
                raise InvalidModelDeclaration(
                    model,
                    f"auto-increment primary key '{generated[0]}' "
                    "cannot be combined with a composite key",
                )

        return cls(
            model=model,
            columns=tuple(columns),
            composite_key=tuple(composite_key) if composite_key is not None else None,
            table_name=table_name,
        )

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @property
    def insert_columns(self) -> list[ColumnDescriptor]:
        """Columns written by INSERT (auto-increment primary keys excluded)."""
        return [col for col in self.columns if not col.is_generated]

    def get(self, name: str) -> ColumnDescriptor | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def values(self, entity: Any) -> dict[str, Any]:
        """Read the column values of an entity, in column order."""
        return {col.name: getattr(entity, col.name, None) for col in self.columns}


def _unwrap_optional(annotation: Any) -> Any:
    """Return T for Optional[T] / T | None, the annotation otherwise."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def describe_model(model: type) -> ModelDescriptor:
    """Build a ModelDescriptor by reading a model's declaration.

    Dataclass fields carry role flags via column(); plain annotated classes
    produce columns without roles. The table name and composite key come
    from the @table decorator.
    """
    hints = get_type_hints(model)

    if dataclasses.is_dataclass(model):
        fields = [(f.name, f.metadata.get(COLUMN_METADATA) or ColumnInfo()) for f in dataclasses.fields(model)]
    else:
        fields = [(name, ColumnInfo()) for name in hints if not name.startswith("_")]

    columns = tuple(
        ColumnDescriptor(
            name=name,
            type=column_type_for(_unwrap_optional(hints.get(name, Any))),
            primary_key=info.primary_key,
            auto_increment=info.primary_key and info.auto_increment,
            unique=info.unique,
            required=info.required,
            foreign_key=info.foreign_key,
            message=info.message,
        )
        for name, info in fields
    )

    return ModelDescriptor.build(
        model,
        columns,
        composite_key=getattr(model, COMPOSITE_KEY_ATTR, None),
        table_name=getattr(model, TABLE_NAME_ATTR, None),
    )


class ModelRegistry:
    """Cache of ModelDescriptor keyed by model type.

    resolve() builds a descriptor on first use and returns the cached one
    afterwards. Concurrent first resolution may compute twice, but only one
    result is ever stored and returned (insert-if-absent under a lock).
    """

    def __init__(self) -> None:
        self._descriptors: dict[Any, ModelDescriptor] = {}
        self._lock = threading.Lock()

    def __contains__(self, model: Any) -> bool:
        return model in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def resolve(self, model: type) -> ModelDescriptor:
        """Return the cached descriptor for model, building it if needed."""
        cached = self._descriptors.get(model)
        if cached is not None:
            return cached

        descriptor = describe_model(model)
        with self._lock:
            return self._descriptors.setdefault(model, descriptor)

    def register(self, model: Any, descriptor: ModelDescriptor) -> ModelDescriptor:
        """Store an explicitly built descriptor for model.

        Raises:
            ValueError: If a different descriptor is already registered.
        """
        with self._lock:
            existing = self._descriptors.setdefault(model, descriptor)
        if existing is not descriptor and existing != descriptor:
            raise ValueError(f"A different descriptor is already registered for {model!r}")
        return existing

    def descriptor_for(self, entity: Any) -> ModelDescriptor:
        """Return the descriptor for an entity instance's type."""
        return self.resolve(type(entity))


__all__ = ["ColumnDescriptor", "ModelDescriptor", "ModelRegistry", "describe_model"]
