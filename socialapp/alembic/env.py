"""
Migration environment for the socialapp schema.

The database URL comes from ``sqlalchemy.url`` when alembic.ini or ``-x``
sets one, otherwise from the same ``DATABASE_URL`` settings the app reads.
"""

import asyncio
import logging

from alembic import context
from pythonjsonlogger import jsonlogger
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from socialapp.config import get_settings, normalize_database_url
from socialapp.models import Base

config = context.config

logger = logging.getLogger('socialapp.migrations')
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# every table registered on Base by socialapp.models
target_metadata = Base.metadata


def database_url() -> str:
    url = config.get_main_option('sqlalchemy.url')
    if url:
        return normalize_database_url(url)
    return get_settings().database_url


def run_migrations_offline():
    """Emit the migration SQL to stdout instead of running it"""
    logger.info({'msg': 'migrations_offline'})
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online():
    url = database_url()
    logger.info({'msg': 'migrations_online', 'dialect': url.split(':', 1)[0]})
    connectable: AsyncEngine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with connectable.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
