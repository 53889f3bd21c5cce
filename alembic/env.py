"""
Alembic Environment Configuration

Runs schema migrations for the Book Review API.

Key responsibilities:
1. Load the database URL from bookreview settings (not alembic.ini)
2. Register every model on Base.metadata for autogenerate
3. Run migrations online (connected) or offline (emit SQL)

MIGRATION WORKFLOW:
===================
1. Change the models in bookreview/models/
2. Run: alembic revision --autogenerate -m "description"
3. Review the generated file in alembic/versions/
4. Run: alembic upgrade head
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from bookreview.config import get_settings
from bookreview.database import Base
from bookreview.models import Book, Review, User  # noqa: F401 - registers tables

settings = get_settings()

config = context.config

# The URL always comes from the environment, never from alembic.ini
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Emit migration SQL without connecting.

    Usage:
        alembic upgrade head --sql > migration.sql
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live connection (the normal path)."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # Don't pool connections for migrations
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite needs batch mode for ALTER TABLE
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
