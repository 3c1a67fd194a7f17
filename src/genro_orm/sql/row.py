# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Row: loosely-typed query result as ordered (column, value) pairs."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, overload


class Row(Sequence[tuple[str, Any]]):
    """Immutable result row keeping column order and per-cell values.

    Iterating yields ``(name, value)`` pairs. Cells are reachable by position
    (``row[0]`` -> pair) or by column name (``row["name"]`` -> value).
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[tuple[str, Any]]):
        self._cells: tuple[tuple[str, Any], ...] = tuple((str(k), v) for k, v in cells)

    @classmethod
    def from_values(cls, names: Sequence[str], values: Sequence[Any]) -> Row:
        return cls(list(zip(names, values, strict=True)))

    @overload
    def __getitem__(self, key: int) -> tuple[str, Any]: ...

    @overload
    def __getitem__(self, key: slice) -> Sequence[tuple[str, Any]]: ...

    @overload
    def __getitem__(self, key: str) -> Any: ...

    def __getitem__(self, key):
        if isinstance(key, str):
            for name, value in self._cells:
                if name == key:
                    return value
            raise KeyError(key)
        return self._cells[key]

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Row):
            return self._cells == other._cells
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._cells)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={value!r}" for name, value in self._cells)
        return f"Row({inner})"

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def keys(self) -> list[str]:
        return [name for name, _ in self._cells]

    def values(self) -> list[Any]:
        return [value for _, value in self._cells]

    def as_dict(self) -> dict[str, Any]:
        """Return a dict copy (later duplicate column names win)."""
        return dict(self._cells)


__all__ = ["Row"]
