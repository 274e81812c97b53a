from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from answerbank.database.models import Base
from answerbank.config import get_settings
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

# Alembic Config object, giving access to the values in alembic.ini
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# The URL always comes from settings so migrations and the app agree
database_url = get_settings().DATABASE_URL
config.set_main_option("sqlalchemy.url", database_url)
logger.info(f"Database URL configured for migrations: {database_url.split('@')[-1]}")


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Configures the context with just a URL, so no DBAPI is needed; the
    generated SQL is emitted to the script output.
    """
    url = config.get_main_option("sqlalchemy.url")
    logger.info("Running migrations in offline mode")

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    logger.info("Running migrations in online mode")

    configuration = config.get_section(config.config_ini_section, {})

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            transaction_per_migration=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
