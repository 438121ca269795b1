"""
Alembic environment for the BookHaven schema.

The database URL comes from BookHaven settings (DATABASE_URL), never from
alembic.ini, so migrations always target the same database as the API.

    alembic upgrade head                            # apply migrations
    alembic upgrade head --sql > migration.sql      # offline: emit SQL only
    alembic revision --autogenerate -m "message"    # after changing models
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from bookhaven.config import get_settings
from bookhaven.database import Base
import bookhaven.models  # noqa: F401 - registers every table on Base.metadata

settings = get_settings()

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Shared by both modes. SQLite cannot ALTER most things, so batch mode
# recreates tables there.
CONFIGURE_OPTIONS = {
    "target_metadata": target_metadata,
    "compare_type": True,
    "render_as_batch": settings.is_sqlite,
}


def run_migrations_offline() -> None:
    """Write the migration SQL instead of executing it."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTIONS,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived, unpooled connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, **CONFIGURE_OPTIONS)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
