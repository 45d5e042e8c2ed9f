"""Alembic environment for the AgroStudy schema.

Migrations always run through a sync psycopg2 engine; the URL is derived
from the application settings rather than alembic.ini.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from agrostudy.config import get_settings
from agrostudy.db.base import Base
from agrostudy.db import models  # noqa: F401 - registers the AgroStudy tables

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline(url: str) -> None:
    """Emit the migration SQL to the script output without connecting."""
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online(url: str) -> None:
    engine = create_engine(url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


database_url = get_settings().database_url_sync

if context.is_offline_mode():
    run_migrations_offline(database_url)
else:
    run_migrations_online(database_url)
