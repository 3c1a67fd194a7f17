# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base adapter class for async database backends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from ..row import Row

logger = logging.getLogger(__name__)


class DbAdapter(ABC):
    """Abstract base class for async database adapters.

    Provides a unified interface over one store driver:
    - Connection management (acquire, release, shutdown)
    - Transaction control (commit, rollback on connection)
    - Statement execution (execute, fetch_scalar, iterate)

    Queries are written with ``:name`` placeholders; adapters whose driver
    uses another paramstyle convert them. Driver errors are raised as
    StoreFailure.
    """

    @abstractmethod
    async def acquire(self) -> Any:
        """Acquire a connection (from pool or newly opened).

        Returns:
            Database connection object.
        """
        ...

    @abstractmethod
    async def release(self, conn: Any) -> None:
        """Release a connection (return it to the pool or close it)."""
        ...

    @abstractmethod
    async def shutdown(self) -> None:
        """Release all adapter resources (application shutdown)."""
        ...

    # -------------------------------------------------------------------------
    # Connection-bound operations
    # -------------------------------------------------------------------------

    @abstractmethod
    async def execute(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> int:
        """Execute statement on connection, return affected row count."""
        ...

    @abstractmethod
    async def fetch_scalar(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Execute query, return the first column of the first row (or None)."""
        ...

    @abstractmethod
    def iterate(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[Row]:
        """Execute query, yield rows lazily as Row objects."""
        ...

    @abstractmethod
    async def commit(self, conn: Any) -> None:
        """Commit transaction on connection."""
        ...

    @abstractmethod
    async def rollback(self, conn: Any) -> None:
        """Rollback transaction on connection."""
        ...

    def _log(self, query: str, params: dict[str, Any] | None) -> None:
        logger.debug("SQL: %s | params=%r", query, params)
