"""
Alembic environment configuration for async migrations.

This file is the standard Alembic entry point for CLI commands (alembic upgrade, etc.).
Alembic CLI automatically executes this file when running migration commands.

This file also contains all migration logic and can be imported programmatically.
"""

from logging.config import fileConfig
import asyncio
import logging
from pathlib import Path
from typing import Optional
from concurrent.futures import ThreadPoolExecutor
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context, config as alembic_config, command

# Import all models so Alembic can detect them
from tennis_tracker.database.db import Base, DATABASE_URL
from tennis_tracker.database import models  # noqa: F401

logger = logging.getLogger(__name__)

# This is the Alembic Config object, which provides
# access to the values within the .ini file in use.
# Only available when run by Alembic CLI (not when imported programmatically)
config = None
try:
    config = context.config
    # Interpret the config file for Python logging.
    if config.config_file_name is not None and config.get_main_option("configure_logging") != "false":
        fileConfig(config.config_file_name, disable_existing_loggers=False)
except AttributeError:
    # Not running via Alembic CLI - that's fine for programmatic use
    pass

# Metadata for autogenerate support
target_metadata = Base.metadata

PACKAGE_DIR = Path(__file__).parent.parent


def _configured_url(config_obj) -> str:
    return config_obj.get_main_option("sqlalchemy.url") or DATABASE_URL


def get_alembic_config(database_url: Optional[str] = None, configure_logging: bool = True):
    """
    Build an Alembic Config pointing at this package's migrations.

    Args:
        database_url: Async database URL to migrate (defaults to DATABASE_URL)
        configure_logging: Whether env.py should apply the ini logging sections
    """
    alembic_ini_path = PACKAGE_DIR / "alembic.ini"
    if not alembic_ini_path.exists():
        raise FileNotFoundError(f"Alembic config file not found: {alembic_ini_path}")

    alembic_cfg = alembic_config.Config(str(alembic_ini_path))
    alembic_cfg.set_main_option("script_location", str(PACKAGE_DIR / "alembic"))
    # ConfigParser interpolation treats % specially
    alembic_cfg.set_main_option("sqlalchemy.url", (database_url or DATABASE_URL).replace("%", "%%"))
    if not configure_logging:
        alembic_cfg.set_main_option("configure_logging", "false")
    return alembic_cfg


def run_migrations_offline(alembic_cfg=None) -> None:
    """Run migrations in 'offline' mode (generates SQL without connecting).

    Args:
        alembic_cfg: Optional Alembic Config object. If not provided, uses context.config.
    """
    config_obj = alembic_cfg if alembic_cfg is not None else config
    if config_obj is None:
        raise ValueError("Alembic config is required for offline migrations")
    url = _configured_url(config_obj)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Execute migrations using the provided connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,  # SQLite cannot ALTER most constraints in place
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations(alembic_cfg=None) -> None:
    """Run migrations in async mode.

    Args:
        alembic_cfg: Optional Alembic Config object. If not provided, uses context.config.
    """
    config_obj = alembic_cfg if alembic_cfg is not None else config
    if config_obj is None:
        raise ValueError("Alembic config is required for async migrations")

    configuration = config_obj.get_section(config_obj.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _configured_url(config_obj)

    logger.info("Creating database connection...")
    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    try:
        logger.info("Executing migrations...")
        async with connectable.connect() as connection:
            await connection.run_sync(do_run_migrations)
        logger.info("Migrations executed successfully")
    except Exception as e:
        logger.error(f"Error during migration execution: {e}", exc_info=True)
        raise
    finally:
        await connectable.dispose()
        logger.info("Database connection closed")


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (called by Alembic CLI)."""
    logger.info("Starting database migrations...")
    try:
        asyncio.run(run_async_migrations())
        logger.info("✓ Migrations completed successfully")
    except Exception as e:
        logger.error(f"✗ Migration failed: {e}", exc_info=True)
        raise


def upgrade_to_head(database_url: Optional[str] = None, configure_logging: bool = True) -> None:
    """Apply all pending migrations (synchronous; must not run inside an event loop)."""
    command.upgrade(get_alembic_config(database_url, configure_logging), "head")


async def run_migrations_online_programmatic(database_url: Optional[str] = None) -> None:
    """Run migrations programmatically (called from main.py).

    Uses Alembic's command API to properly initialize context.
    Raises exceptions if migrations fail.
    """

    def run_upgrade():
        try:
            # Alembic logs which migrations it's running
            upgrade_to_head(database_url, configure_logging=False)
            logger.info("✓ Migrations completed successfully")
        except Exception as e:
            logger.error(f"Migration execution failed: {e}", exc_info=True)
            raise

    # command.upgrade is sync and starts its own event loop, so run it in a thread
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor() as executor:
        await loop.run_in_executor(executor, run_upgrade)


# Alembic CLI entry point - this code runs when you execute:
# - alembic upgrade head
# - alembic downgrade -1
# - alembic revision --autogenerate
# etc.
# Only execute when run by Alembic CLI (config is set)
if config is not None:
    try:
        if context.is_offline_mode():
            run_migrations_offline()
        else:
            run_migrations_online()
    except AttributeError:
        # Not running via Alembic CLI - skip CLI entry point
        pass
