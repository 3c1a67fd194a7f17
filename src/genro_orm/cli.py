# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CLI entry point for genro-orm (genro-orm command).

Commands:
    dialects: List available SQL dialects and their type tables
    ddl: Print the CREATE TABLE statement of a model
    register: Create the table of a model in a database
    version: Show version info

Models are referenced as ``package.module:ClassName``.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from .config import OrmConfig
from .errors import OrmError
from .sql import DIALECTS, ColumnType, SqlDb, create_table_sql, get_dialect
from .sql.model import ModelRegistry

console = Console()


def load_model(reference: str) -> Any:
    """Import a model from a ``module:ClassName`` reference.

    Raises:
        click.BadParameter: If the reference is malformed or cannot be imported.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"Expected 'module:ClassName', got '{reference}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import module '{module_name}': {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError:
        raise click.BadParameter(f"Module '{module_name}' has no attribute '{attr}'") from None


def _fail(error: Exception) -> None:
    console.print(f"[red]error: {error}[/red]")
    sys.exit(1)


# ============================================================================
# CLI Commands
# ============================================================================


@click.group()
@click.version_option(package_name="genro-orm")
@click.option("--log-level", default=None, help="Logging level (default: GENRO_ORM_LOG_LEVEL or WARNING).")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Genro ORM - schema and query synthesis for SQL databases."""
    config = OrmConfig.from_env()
    if log_level:
        config.log_level = log_level.upper()
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("genro_orm").setLevel(config.log_level)
    ctx.obj = config


@main.command("dialects")
def dialects_cmd() -> None:
    """List SQL dialects with their column types."""
    table = Table(title="SQL Dialects")
    table.add_column("Name", style="cyan")
    for col_type in ColumnType:
        table.add_column(col_type.name.capitalize())
    table.add_column("Auto-increment")

    seen: set[type] = set()
    for name, dialect_class in DIALECTS.items():
        if dialect_class in seen:
            continue
        seen.add(dialect_class)
        dialect = dialect_class()
        table.add_row(
            name,
            *(dialect.map_type(t) for t in ColumnType),
            dialect.auto_increment_syntax,
        )

    console.print(table)


@main.command("ddl")
@click.argument("model")
@click.option("--dialect", "-d", default=None, help="Dialect name (default: GENRO_ORM_DIALECT or sqlite).")
@click.option("--table", "-t", "table_name", default=None, help="Table name (default: declared by the model).")
@click.pass_obj
def ddl_cmd(config: OrmConfig, model: str, dialect: str | None, table_name: str | None) -> None:
    """Print the CREATE TABLE statement for MODEL (module:ClassName)."""
    model_class = load_model(model)
    try:
        sql = create_table_sql(
            ModelRegistry().resolve(model_class),
            get_dialect(dialect or config.dialect),
            table_name,
        )
    except (OrmError, ValueError) as e:
        _fail(e)
    click.echo(sql)


@main.command("register")
@click.argument("model")
@click.option("--db", "db_path", default=None, help="Connection string (default: GENRO_ORM_DB).")
@click.option("--dialect", "-d", default=None, help="Dialect name (default: GENRO_ORM_DIALECT or sqlite).")
@click.option("--table", "-t", "table_name", default=None, help="Table name (default: declared by the model).")
@click.pass_obj
def register_cmd(
    config: OrmConfig,
    model: str,
    db_path: str | None,
    dialect: str | None,
    table_name: str | None,
) -> None:
    """Create the table of MODEL (module:ClassName) if it does not exist."""
    model_class = load_model(model)

    async def run() -> str:
        db = SqlDb(db_path or config.db_path, dialect or config.dialect)
        try:
            return await db.register_model(model_class, table_name)
        finally:
            await db.shutdown()

    try:
        name = asyncio.run(run())
    except (OrmError, ValueError) as e:
        _fail(e)
    console.print(f"[green]Table '{name}' ready[/green]")


@main.command("version")
def version_cmd() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"genro-orm {__version__}")


if __name__ == "__main__":
    main()
