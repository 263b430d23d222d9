from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set inside run_migrations_* once the models are imported.
target_metadata = None


def _configure_url() -> None:
    # DATABASE_URL (or the DB_* pieces) from the service settings wins over alembic.ini.
    from storefront.core.config import get_settings

    config.set_main_option("sqlalchemy.url", get_settings().database_url_resolved)


def _load_metadata():
    # Imported here so the models register on Base.metadata.
    from storefront import models  # noqa: F401
    from storefront.core.db import Base

    return Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    global target_metadata
    _configure_url()
    target_metadata = _load_metadata()

    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    global target_metadata
    _configure_url()
    target_metadata = _load_metadata()

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
