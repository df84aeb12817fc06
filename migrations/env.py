# migrations/env.py
from logging.config import fileConfig

from alembic import context
from sqlmodel import SQLModel

from foodprint.core.config import get_settings
from foodprint.database import build_engine, resolve_database_url

# Import models so SQLModel metadata is populated for autogenerate
from foodprint.models import user as _user_models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata
settings = get_settings()


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of running against a live database."""
    url = resolve_database_url(settings)
    context.configure(
        url=str(url),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = build_engine(settings)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER constraints in place
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
