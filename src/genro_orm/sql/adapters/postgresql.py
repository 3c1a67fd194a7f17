# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""PostgreSQL async adapter using psycopg3 with connection pooling.

acquire() gets a connection from the pool, release() returns it.
Each unit of work gets its own connection and transaction.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ...errors import StoreFailure
from ..row import Row
from .base import DbAdapter

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class PostgresAdapter(DbAdapter):
    """PostgreSQL async adapter with connection pooling.

    Uses :name placeholders converted to %(name)s. Pool is initialized
    lazily on first acquire().
    """

    def __init__(self, dsn: str, pool_size: int = 10, connect_timeout: float = 10.0):
        self.dsn = dsn
        self.pool_size = pool_size
        self.connect_timeout = connect_timeout
        self._pool: Any = None

        # Verify psycopg is available at init time
        try:
            import psycopg  # noqa: F401
        except ImportError as e:
            raise ImportError(
                "PostgreSQL support requires psycopg. "
                "Install with: pip install genro-orm[postgresql]"
            ) from e

    def _convert_placeholders(self, query: str) -> str:
        """Convert :name placeholders to %(name)s for psycopg, escaping literal %."""
        query = query.replace("%", "%%")
        return re.sub(r"(?<!:):([a-zA-Z_][a-zA-Z0-9_]*)", r"%(\1)s", query)

    async def _ensure_pool(self) -> None:
        """Initialize connection pool if not already open."""
        if self._pool is not None:
            return

        import asyncio

        from psycopg_pool import AsyncConnectionPool

        self._pool = AsyncConnectionPool(
            self.dsn,
            min_size=1,
            max_size=self.pool_size,
            open=False,
        )
        try:
            await asyncio.wait_for(
                self._pool.open(wait=True, timeout=self.connect_timeout),
                timeout=self.connect_timeout + 1,
            )
        except asyncio.TimeoutError:
            await self._pool.close()
            self._pool = None
            raise StoreFailure(
                f"PostgreSQL connection timed out after {self.connect_timeout}s. "
                "Check credentials and server availability."
            ) from None
        except Exception as e:
            await self._pool.close()
            self._pool = None
            raise StoreFailure(f"PostgreSQL connection failed: {e}") from e

    async def acquire(self) -> Any:
        """Acquire connection from pool."""
        await self._ensure_pool()
        return await self._pool.getconn()

    async def release(self, conn: Any) -> None:
        """Return connection to pool."""
        if self._pool:
            await self._pool.putconn(conn)

    async def shutdown(self) -> None:
        """Close connection pool (application shutdown)."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def commit(self, conn: Any) -> None:
        """Commit transaction on connection."""
        import psycopg

        try:
            await conn.commit()
        except psycopg.Error as e:
            raise StoreFailure(str(e)) from e

    async def rollback(self, conn: Any) -> None:
        """Rollback transaction on connection."""
        await conn.rollback()

    async def execute(self, conn: Any, query: str, params: dict[str, Any] | None = None) -> int:
        """Execute statement, return affected row count."""
        import psycopg

        self._log(query, params)
        try:
            async with conn.cursor() as cur:
                await cur.execute(self._convert_placeholders(query), params or {})
                return cur.rowcount
        except psycopg.Error as e:
            raise StoreFailure(str(e), query) from e

    async def fetch_scalar(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Execute query, return first column of first row."""
        import psycopg

        self._log(query, params)
        try:
            async with conn.cursor() as cur:
                await cur.execute(self._convert_placeholders(query), params or {})
                row = await cur.fetchone()
        except psycopg.Error as e:
            raise StoreFailure(str(e), query) from e
        return row[0] if row is not None else None

    async def iterate(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[Row]:
        """Execute query, yield rows one at a time."""
        import psycopg

        self._log(query, params)
        try:
            async with conn.cursor() as cur:
                await cur.execute(self._convert_placeholders(query), params or {})
                cols = [d.name for d in cur.description or ()]
                async for record in cur:
                    yield Row.from_values(cols, record)
        except psycopg.Error as e:
            raise StoreFailure(str(e), query) from e
