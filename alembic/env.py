# alembic/env.py
# Versioned migrations for deployments that prefer them over the startup
# column sync in wardrobe_project/db/schema_sync.py.
import asyncio
from logging.config import fileConfig

from sqlalchemy import pool

from alembic import context

from config.settings import settings
from wardrobe_project.db.database import Base, make_engine
from wardrobe_project.db import orm_models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# wardrobe.db is SQLite, where column and constraint changes need table rebuilds
MIGRATION_OPTIONS = {"target_metadata": target_metadata, "render_as_batch": True}


def run_migrations_offline() -> None:
    """Writes the wardrobe migration script as SQL for review before applying it by hand."""
    context.configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()

def apply_wardrobe_migrations(connection):
    context.configure(connection=connection, compare_server_default=True, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()

async def run_migrations_online() -> None:
    migration_engine = make_engine(settings.DATABASE_URL, poolclass=pool.NullPool)
    async with migration_engine.connect() as connection:
        await connection.run_sync(apply_wardrobe_migrations)
    await migration_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
