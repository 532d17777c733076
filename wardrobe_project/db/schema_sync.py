# wardrobe_project/db/schema_sync.py
"""
Startup schema maintenance.

`create_all` only creates missing tables. Databases written by older releases
keep their old tables, so after creating tables we compare every ORM column
against the live table and add the ones that are missing.
"""
import logging
from typing import Dict, List

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from .database import Base, AsyncSessionLocal
from . import orm_models  # noqa: F401  (registers the tables on Base.metadata)
from ..services import category_service

logger = logging.getLogger(__name__)


def _column_ddl(column, dialect) -> str:
    col_type = column.type.compile(dialect=dialect)
    ddl = f'"{column.name}" {col_type}'
    if column.server_default is not None:
        default = column.server_default.arg
        if isinstance(default, str):
            ddl += " DEFAULT '" + default.replace("'", "''") + "'"
        else:
            ddl += f" DEFAULT {default.compile(dialect=dialect)}"
    return ddl


def _add_missing_columns(conn: Connection) -> Dict[str, List[str]]:
    inspector = inspect(conn)
    existing_tables = set(inspector.get_table_names())
    added: Dict[str, List[str]] = {}

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue
        live_columns = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in live_columns:
                continue
            # SQLite cannot add a NOT NULL column without a default
            if not column.nullable and column.server_default is None:
                logger.warning(
                    f"Cannot add column {table.name}.{column.name}: NOT NULL without server default."
                )
                continue
            conn.execute(text(f'ALTER TABLE "{table.name}" ADD COLUMN {_column_ddl(column, conn.dialect)}'))
            added.setdefault(table.name, []).append(column.name)
            logger.info(f"Added missing column {table.name}.{column.name}")
    return added


async def sync_schema(engine: AsyncEngine) -> Dict[str, List[str]]:
    """Creates missing tables, then adds missing columns. Returns the added columns per table."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        return await conn.run_sync(_add_missing_columns)


async def init_db(engine: AsyncEngine, session_factory=AsyncSessionLocal) -> None:
    added = await sync_schema(engine)
    if added:
        logger.info(f"Schema upgraded: {added}")
    async with session_factory() as session:
        created = await category_service.seed_default_categories(session)
        if created:
            logger.info(f"Seeded {created} default categories.")
