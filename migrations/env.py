"""Alembic environment for the DocxCheck identity and history tables."""
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection

from docxcheck.core.settings import settings
from docxcheck.db.session import Base, enable_sqlite_foreign_keys

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    """ALEMBIC_URL wins, then alembic.ini, then the application setting."""
    return (
        os.getenv("ALEMBIC_URL")
        or config.get_main_option("sqlalchemy.url")
        or settings.database_url
    )


def _configure(connection: Connection | None = None, url: str | None = None) -> None:
    if connection is not None:
        # SQLite cannot ALTER most constraints in place.
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
    else:
        context.configure(
            url=url,
            target_metadata=target_metadata,
            compare_type=True,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )


def run_offline() -> None:
    """Emit SQL for the target database without connecting to it."""
    _configure(url=database_url())
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """Apply migrations over a live connection."""
    engine = create_engine(database_url(), poolclass=pool.NullPool)
    enable_sqlite_foreign_keys(engine)

    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
