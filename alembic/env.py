"""
Migration environment for the donation schema.

The app talks to the database through async drivers; Alembic runs
synchronously, so the configured URL is mapped onto the matching sync driver.
SQLite needs batch mode for ALTERs that rebuild the table (check constraints).
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url
from alembic import context

from donation_api.config import get_settings
from donation_api.db.base import Base
from donation_api.db.session import sync_database_url
from donation_api.db.models import Product, User  # noqa: F401 - registers tables on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


database_url = sync_database_url(get_settings().database_url)
# configparser treats % as interpolation
config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))


def _configure_kwargs() -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": make_url(database_url).get_backend_name() == "sqlite",
    }


def run_migrations_offline() -> None:
    """Render the migration SQL for ``alembic upgrade --sql``."""
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(),
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
        context.configure(connection=connection, **_configure_kwargs())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
