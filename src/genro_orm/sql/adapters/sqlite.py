# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite async adapter using aiosqlite."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import aiosqlite

from ...errors import StoreFailure
from ..row import Row
from .base import DbAdapter

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

MEMORY = ":memory:"


class SqliteAdapter(DbAdapter):
    """SQLite async adapter.

    Uses :name placeholders natively. For a file database each acquire()
    opens a new connection and release() closes it. An in-memory database
    only exists inside its connection, so it keeps one shared connection
    until shutdown(); it is meant for a single caller at a time.

    Foreign key enforcement is switched on for every connection.
    datetime, date and Decimal values are bound as ISO text.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path or MEMORY
        self._shared: aiosqlite.Connection | None = None

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY

    def _bind(self, params: dict[str, Any] | None) -> dict[str, Any]:
        """Convert values sqlite3 cannot bind (or binds with deprecated adapters)."""
        bound: dict[str, Any] = {}
        for key, value in (params or {}).items():
            if isinstance(value, datetime):
                value = value.isoformat(sep=" ")
            elif isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, Decimal):
                value = str(value)
            bound[key] = value
        return bound

    async def _connect(self) -> aiosqlite.Connection:
        try:
            conn = await aiosqlite.connect(self.db_path)
            await conn.execute("PRAGMA foreign_keys = ON")
        except aiosqlite.Error as e:
            raise StoreFailure(f"SQLite connection failed: {e}") from e
        return conn

    async def acquire(self) -> aiosqlite.Connection:
        """Open a new connection (or return the shared in-memory one)."""
        if not self.in_memory:
            return await self._connect()
        if self._shared is None:
            self._shared = await self._connect()
        return self._shared

    async def release(self, conn: aiosqlite.Connection) -> None:
        """Close connection (the shared in-memory one stays open)."""
        if conn is not self._shared:
            await conn.close()

    async def shutdown(self) -> None:
        """Close the shared in-memory connection, if any."""
        if self._shared is not None:
            await self._shared.close()
            self._shared = None

    async def commit(self, conn: aiosqlite.Connection) -> None:
        """Commit transaction on connection."""
        try:
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreFailure(str(e)) from e

    async def rollback(self, conn: aiosqlite.Connection) -> None:
        """Rollback transaction on connection."""
        await conn.rollback()

    async def execute(
        self, conn: aiosqlite.Connection, query: str, params: dict[str, Any] | None = None
    ) -> int:
        """Execute statement, return affected row count."""
        self._log(query, params)
        try:
            async with conn.execute(query, self._bind(params)) as cursor:
                return cursor.rowcount
        except aiosqlite.Error as e:
            raise StoreFailure(str(e), query) from e

    async def fetch_scalar(
        self, conn: aiosqlite.Connection, query: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Execute query, return first column of first row."""
        self._log(query, params)
        try:
            async with conn.execute(query, self._bind(params)) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreFailure(str(e), query) from e
        return row[0] if row is not None else None

    async def iterate(
        self, conn: aiosqlite.Connection, query: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[Row]:
        """Execute query, yield rows one at a time."""
        self._log(query, params)
        try:
            async with conn.execute(query, self._bind(params)) as cursor:
                cols = [c[0] for c in cursor.description or ()]
                async for row in cursor:
                    yield Row.from_values(cols, row)
        except aiosqlite.Error as e:
            raise StoreFailure(str(e), query) from e
