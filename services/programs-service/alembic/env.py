import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine

from programs_service import models  # noqa: F401
from programs_service.database import DATABASE_URL as SERVICE_DATABASE_URL
from programs_service.database import Base, ensure_sync_url

config = context.config
target_metadata = Base.metadata

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

DB_URL = SERVICE_DATABASE_URL or os.getenv("PROGRAMS_DATABASE_URL") or config.get_main_option("sqlalchemy.url")
if DB_URL:
    config.set_main_option("sqlalchemy.url", ensure_sync_url(DB_URL))


def run_migrations_offline() -> None:
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
    """Run migrations in 'online' mode over a synchronous driver."""
    db_url = config.get_main_option("sqlalchemy.url")
    if not db_url:
        raise RuntimeError("PROGRAMS_DATABASE_URL environment variable is not set")

    connectable = create_engine(db_url)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
