"""Alembic environment for the pages schema. Raw SQL migrations; no ORM metadata."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine


def sync_url(dsn: str) -> str:
    """asyncpg DSN (postgres:// or postgresql+asyncpg://) → sync SQLAlchemy URL."""
    for prefix in ("postgres://", "postgresql+asyncpg://"):
        if dsn.startswith(prefix):
            return "postgresql://" + dsn[len(prefix):]
    return dsn


config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

url = sync_url(os.environ.get("DATABASE_URL", ""))

if context.is_offline_mode():
    context.configure(url=url, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
else:
    with create_engine(url).connect() as connection:
        context.configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
