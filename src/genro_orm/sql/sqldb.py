# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Async database manager: model registration, CRUD and transactions."""

from __future__ import annotations

import dataclasses
import logging
from contextlib import aclosing, asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, TypeAdapter

from ..errors import MultipleRowsFound, NotInitialized, TransactionClosed
from .adapters import DbAdapter, get_adapter
from .column import COLUMN_PYTHON_TYPES, ColumnType
from .dialects import SqlDialect, get_dialect
from .model import ModelRegistry
from .schema import create_table_sql, resolve_table_name
from .validator import Validator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from ..config import OrmConfig
    from .model import ModelDescriptor
    from .row import Row

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Transaction:
    """Handle of one unit of work, bound to one connection.

    Created by SqlDb.transaction(); pass it as ``tx=`` to run operations
    inside the unit. It cannot be used after commit or rollback.
    """

    def __init__(self, db: SqlDb, conn: Any):
        self.db = db
        self._conn = conn
        self.closed = False

    @property
    def conn(self) -> Any:
        """Connection of this unit of work.

        Raises:
            TransactionClosed: If the unit already committed or rolled back.
        """
        if self.closed:
            raise TransactionClosed()
        return self._conn


class SqlDb:
    """Async database manager bound to one adapter and one SQL dialect.

    Features:
    - Model registration: resolve metadata, synthesize and run CREATE TABLE
    - Validation of required/unique/composite-key constraints
    - Parameterized insert/update/delete built from model metadata
    - Ad-hoc queries returning Row objects or typed models
    - Transactions via transaction() / run_in_transaction()

    Every operation accepts an optional ``tx``. Without it the operation
    runs in its own unit of work (acquire, run, commit, release).

    Identifiers (table and column names) are inserted verbatim into SQL
    and are never escaped; only values are bound as parameters.

    Usage:
        db = SqlDb("/data/app.db", "sqlite")
        await db.register_model(User)

        user_id = await db.insert("users", User(name="Alice", email="a@x.com"))
        user = await db.get_by_id(User, "id", user_id)

        async def work(tx):
            await db.insert("users", User(name="Bob", email="b@x.com"), tx=tx)
            await db.delete("users", "id", user_id, tx=tx)

        await db.run_in_transaction(work)  # COMMIT, or ROLLBACK and re-raise

        await db.shutdown()
    """

    def __init__(
        self,
        connection_string: str | DbAdapter | None = None,
        dialect: str | SqlDialect | None = None,
        *,
        registry: ModelRegistry | None = None,
        validate_on_insert: bool = False,
    ):
        """Initialize database manager.

        Args:
            connection_string: Connection string or adapter. Optional here,
                can be bound later with initialize().
            dialect: Dialect name or instance. Never inferred from the
                connection string.
            registry: Descriptor cache to use (a private one by default).
            validate_on_insert: Run validate() before every insert().
        """
        self.adapter: DbAdapter | None = None
        self.dialect: SqlDialect | None = None
        self.registry = registry or ModelRegistry()
        self.validate_on_insert = validate_on_insert
        self.validator = Validator(self)
        self.tables: dict[Any, str] = {}
        self._type_adapters: dict[Any, TypeAdapter[Any]] = {}

        if connection_string is not None and dialect is not None:
            self.initialize(connection_string, dialect)

    @classmethod
    def from_config(cls, config: OrmConfig, registry: ModelRegistry | None = None) -> SqlDb:
        """Create an initialized SqlDb from an OrmConfig."""
        return cls(
            config.db_path,
            config.dialect,
            registry=registry,
            validate_on_insert=config.validate_on_insert,
        )

    def initialize(self, connection: str | DbAdapter, dialect: str | SqlDialect) -> None:
        """Bind the store adapter and the SQL dialect.

        Args:
            connection: Connection string (see get_adapter) or adapter instance.
            dialect: Dialect name ("sqlite", "postgresql", ...) or instance.
        """
        if connection is None or dialect is None:
            raise ValueError("initialize() requires both a connection and a dialect")
        self.adapter = connection if isinstance(connection, DbAdapter) else get_adapter(connection)
        self.dialect = get_dialect(dialect)
        logger.debug("SqlDb initialized: adapter=%s dialect=%s", type(self.adapter).__name__, self.dialect.name)

    @property
    def initialized(self) -> bool:
        return self.adapter is not None and self.dialect is not None

    def _ensure_initialized(self) -> None:
        if not self.initialized:
            raise NotInitialized()

    async def shutdown(self) -> None:
        """Release adapter resources (application shutdown)."""
        if self.adapter is not None:
            await self.adapter.shutdown()

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Context manager for one unit of work.

        Acquires a connection, yields its Transaction, commits on normal
        exit, rolls back and re-raises on exception, releases the
        connection on every path.

        Usage:
            async with db.transaction() as tx:
                await db.insert("items", item_a, tx=tx)
                await db.insert("items", item_b, tx=tx)
            # COMMIT automatic, ROLLBACK if the block raised
        """
        self._ensure_initialized()
        conn = await self.adapter.acquire()
        tx = Transaction(self, conn)
        try:
            yield tx
            await self.adapter.commit(conn)
        except Exception:
            logger.warning("Rolling back transaction", exc_info=True)
            await self.adapter.rollback(conn)
            raise
        finally:
            tx.closed = True
            await self.adapter.release(conn)

    async def run_in_transaction(self, work: Callable[[Transaction], Awaitable[T]]) -> T:
        """Run ``await work(tx)`` in one transaction and return its result.

        Commits if work returns, rolls back and re-raises the original
        exception if it fails.
        """
        async with self.transaction() as tx:
            return await work(tx)

    @asynccontextmanager
    async def _unit(self, tx: Transaction | None) -> AsyncIterator[Any]:
        """Yield the connection of tx, or of a new implicit unit of work."""
        self._ensure_initialized()
        if tx is not None:
            if tx.db is not self:
                raise ValueError("Transaction belongs to a different SqlDb")
            yield tx.conn
            return
        async with self.transaction() as own:
            yield own.conn

    # -------------------------------------------------------------------------
    # Models and schema
    # -------------------------------------------------------------------------

    def describe(self, model: Any) -> ModelDescriptor:
        """Return the cached descriptor of a model type."""
        return self.registry.resolve(model)

    def table_for(self, model: Any, table: str | None = None) -> str:
        """Return the explicit table, else the registered one, else the declared one.

        Raises:
            MissingTableName: If no table name is known for model.
        """
        return table or self.tables.get(model) or resolve_table_name(self.describe(model))

    def create_table_sql(self, model: Any, table_name: str | None = None) -> str:
        """Return the CREATE TABLE statement for model in this db's dialect."""
        self._ensure_initialized()
        return create_table_sql(self.describe(model), self.dialect, table_name)

    async def register_model(
        self, model: Any, table_name: str | None = None, tx: Transaction | None = None
    ) -> str:
        """Register a model and create its table if missing.

        The table name comes from table_name, else from the model's @table
        declaration. Running it again for an existing table changes nothing.

        Returns:
            The table name used.

        Raises:
            NotInitialized: If no adapter/dialect is bound.
            MissingTableName: If no table name can be resolved.
            UnsupportedType: If a field type has no mapping in the dialect.
        """
        self._ensure_initialized()
        descriptor = self.describe(model)
        name = resolve_table_name(descriptor, table_name)
        sql = create_table_sql(descriptor, self.dialect, name)
        logger.info("Generated SQL for table '%s':\n%s", name, sql)

        async with self._unit(tx) as conn:
            await self.adapter.execute(conn, sql)

        self.tables[model] = name
        return name

    async def validate(
        self, entity: Any, table: str | None = None, tx: Transaction | None = None
    ) -> None:
        """Validate an entity against its model constraints and the stored rows.

        Raises:
            CompositeKeyViolation, RequiredFieldMissing, UniqueConstraintViolation.
        """
        self._ensure_initialized()
        descriptor = self.registry.descriptor_for(entity)
        name = self.table_for(type(entity), table)
        await self.validator.validate(descriptor, entity, name, tx=tx)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def execute(
        self, query: str, params: dict[str, Any] | None = None, tx: Transaction | None = None
    ) -> int:
        """Execute a raw statement, return affected row count."""
        async with self._unit(tx) as conn:
            return await self.adapter.execute(conn, query, params)

    async def scalar(
        self, query: str, params: dict[str, Any] | None = None, tx: Transaction | None = None
    ) -> Any:
        """Execute a raw query, return the first column of the first row."""
        async with self._unit(tx) as conn:
            return await self.adapter.fetch_scalar(conn, query, params)

    async def insert(self, table: str, entity: Any, tx: Transaction | None = None) -> Any:
        """Insert an entity and return the id generated by the store.

        Auto-increment primary key columns are left out of the INSERT; the
        id is read with the dialect's last-insert-id query on the same
        connection. Models without a generated key return None.
        """
        self._ensure_initialized()
        descriptor = self.registry.descriptor_for(entity)
        if self.validate_on_insert:
            await self.validate(entity, table, tx=tx)

        values = descriptor.values(entity)
        cols = [col.name for col in descriptor.insert_columns]
        if cols:
            placeholders = ", ".join(f":{c}" for c in cols)
            query = f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({placeholders})"
        else:
            query = f"INSERT INTO {table} DEFAULT VALUES"
        params = {c: values[c] for c in cols}
        generated = next((col for col in descriptor.columns if col.is_generated), None)

        async with self._unit(tx) as conn:
            await self.adapter.execute(conn, query, params)
            if generated is None:
                return None
            return await self.adapter.fetch_scalar(
                conn, self.dialect.last_insert_id_query(table, generated.name)
            )

    async def update(
        self, table: str, id_column: str, entity: Any, tx: Transaction | None = None
    ) -> int:
        """Update the row whose id_column matches the entity's value.

        Every other column is written. id_column is matched to the model's
        columns case-insensitively.

        Returns:
            Affected row count; 0 when no row matches (not an error).
        """
        self._ensure_initialized()
        descriptor = self.registry.descriptor_for(entity)
        values = descriptor.values(entity)

        key = id_column.lower()
        id_name = next((name for name in values if name.lower() == key), None)
        if id_name is None:
            raise ValueError(f"Column '{id_column}' is not a column of {type(entity).__name__}")
        set_cols = [name for name in values if name.lower() != key]
        if not set_cols:
            raise ValueError(f"No columns to update for {type(entity).__name__}")

        set_clause = ", ".join(f"{c} = :{c}" for c in set_cols)
        query = f"UPDATE {table} SET {set_clause} WHERE {id_column} = :{id_name}"
        return await self.execute(query, values, tx=tx)

    async def delete(
        self, table: str, id_column: str, id_value: Any, tx: Transaction | None = None
    ) -> int:
        """Delete rows whose id_column equals id_value.

        Returns:
            Affected row count; 0 when no row matches (not an error).
        """
        query = f"DELETE FROM {table} WHERE {id_column} = :id"
        return await self.execute(query, {"id": id_value}, tx=tx)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def query(
        self, sql: str, params: dict[str, Any] | None = None, tx: Transaction | None = None
    ) -> AsyncIterator[Row]:
        """Run an ad-hoc query, return a lazy one-shot async iterator of Row.

        Usage:
            async for row in db.query("SELECT id, name FROM users WHERE id > :id", {"id": 3}):
                print(row["name"], row.as_dict())

        Without tx the implicit unit of work stays open until the iterator
        is exhausted or closed (use contextlib.aclosing to stop early).
        """
        self._ensure_initialized()
        return self._rows(sql, params, tx)

    async def _rows(
        self, sql: str, params: dict[str, Any] | None, tx: Transaction | None
    ) -> AsyncIterator[Row]:
        async with self._unit(tx) as conn, aclosing(self.adapter.iterate(conn, sql, params)) as rows:
            async for row in rows:
                yield row

    def query_typed(
        self,
        model: type[T],
        sql: str,
        params: dict[str, Any] | None = None,
        tx: Transaction | None = None,
    ) -> AsyncIterator[T]:
        """Run an ad-hoc query, yield each row as a model instance.

        Store values are coerced to the model's field types (e.g. SQLite
        text timestamps to datetime, 0/1 to bool). Columns that are not
        model fields are ignored.
        """
        self._ensure_initialized()
        return self._typed_rows(model, sql, params, tx)

    async def _typed_rows(
        self, model: type[T], sql: str, params: dict[str, Any] | None, tx: Transaction | None
    ) -> AsyncIterator[T]:
        async with aclosing(self._rows(sql, params, tx)) as rows:
            async for row in rows:
                yield self._materialize(model, row)

    async def query_single_or_default(
        self,
        model: type[T],
        sql: str,
        params: dict[str, Any] | None = None,
        tx: Transaction | None = None,
    ) -> T | None:
        """Return the only row of a query as a model, or None if there is none.

        Raises:
            MultipleRowsFound: If the query returns more than one row.
        """
        found: list[T] = []
        async with aclosing(self.query_typed(model, sql, params, tx)) as rows:
            async for item in rows:
                found.append(item)
                if len(found) > 1:
                    raise MultipleRowsFound(sql)
        return found[0] if found else None

    async def get_all(
        self, model: type[T], table: str | None = None, tx: Transaction | None = None
    ) -> list[T]:
        """Return every row of the model's table."""
        name = self.table_for(model, table)
        return [item async for item in self.query_typed(model, f"SELECT * FROM {name}", tx=tx)]

    async def get_by_id(
        self,
        model: type[T],
        id_column: str,
        id_value: Any,
        table: str | None = None,
        tx: Transaction | None = None,
    ) -> T | None:
        """Return the row whose id_column equals id_value, or None."""
        name = self.table_for(model, table)
        query = f"SELECT * FROM {name} WHERE {id_column} = :id"
        return await self.query_single_or_default(model, query, {"id": id_value}, tx=tx)

    def _type_adapter(self, type_: Any) -> TypeAdapter[Any]:
        adapter = self._type_adapters.get(type_)
        if adapter is None:
            adapter = self._type_adapters.setdefault(type_, TypeAdapter(type_))
        return adapter

    def _materialize(self, model: type[T], row: Row) -> T:
        """Build a model instance from a row, coercing values to column types.

        Dataclasses and pydantic models are validated as a whole. Other
        classes (plain annotated or builder-registered) are created without
        calling __init__ and get one attribute per column present in the row.
        """
        descriptor = self.describe(model)
        names = set(descriptor.column_names)
        data = {name: value for name, value in row if name in names}

        if dataclasses.is_dataclass(model) or (
            isinstance(model, type) and issubclass(model, BaseModel)
        ):
            return self._type_adapter(model).validate_python(data)

        instance = model.__new__(model)
        for col in descriptor.columns:
            if col.name in data:
                setattr(instance, col.name, self._coerce(col.type, data[col.name]))
        return instance

    def _coerce(self, col_type: Any, value: Any) -> Any:
        """Coerce a store value to the Python type of a primitive column."""
        py_type = COLUMN_PYTHON_TYPES.get(col_type) if isinstance(col_type, ColumnType) else None
        if value is None or py_type is None:
            return value
        return self._type_adapter(py_type).validate_python(value)


__all__ = ["SqlDb", "Transaction"]
