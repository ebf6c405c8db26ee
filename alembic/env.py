"""
Alembic environment for RouteDesk.

The connection URL comes from, in order: ``-x db_url=...`` on the command
line, ``sqlalchemy.url`` set programmatically (tests), or the
``DATABASE_URL_SYNC`` setting.
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from routedesk.core.config import get_settings
from routedesk.db.database import Base
import routedesk.models  # noqa: F401  registers every table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

db_url = (
    context.get_x_argument(as_dictionary=True).get("db_url")
    or config.get_main_option("sqlalchemy.url")
    or get_settings().database_url_sync
)
config.set_main_option("sqlalchemy.url", db_url)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
