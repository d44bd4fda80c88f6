"""Database engine management."""

from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine.base import Engine

import constants
from log import get_logger, logging
from configuration import configuration
from models.database.base import Base

# tables need to be registered in metadata before create_all() is called
import models.database.accounts  # noqa: F401  pylint: disable=unused-import
from models.config import (
    DatabaseConfiguration,
    PostgreSQLDatabaseConfiguration,
    SQLiteDatabaseConfiguration,
)
from utils.checks import database_file_check

logger = get_logger(__name__)

engine: Engine | None = None


def get_engine() -> Engine:
    """Get the database engine. Raises an error if not initialized."""
    if engine is None:
        raise RuntimeError(
            "Database engine not initialized. Call initialize_database() first."
        )
    return engine


def create_tables() -> None:
    """Create tables."""
    Base.metadata.create_all(get_engine())


def _create_sqlite_engine(config: SQLiteDatabaseConfiguration, **kwargs: Any) -> Engine:
    """Create SQLite database engine.

    Connections are shared by request handler threads through the pool and
    wait for each other's write locks instead of failing immediately.
    """
    database_file_check(config.db_path)

    try:
        sqlite_engine = create_engine(
            f"sqlite:///{config.db_path}",
            connect_args={
                "check_same_thread": False,
                "timeout": constants.SQLITE_BUSY_TIMEOUT,
            },
            **kwargs,
        )
    except Exception as e:
        logger.exception("Failed to create SQLite engine")
        raise RuntimeError(f"SQLite engine creation failed: {e}") from e

    @event.listens_for(sqlite_engine, "connect")
    def _enable_wal(dbapi_connection: Any, _connection_record: Any) -> None:
        """Let readers proceed while a writer holds the database lock."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return sqlite_engine


def _create_postgres_engine(
    config: PostgreSQLDatabaseConfiguration, **kwargs: Any
) -> Engine:
    """Create PostgreSQL database engine."""
    postgres_url = (
        f"postgresql://{config.user}:{config.password.get_secret_value()}@"
        f"{config.host}:{config.port}/{config.db}"
        f"?sslmode={config.ssl_mode}&gssencmode={config.gss_encmode}"
    )

    is_custom_schema = config.namespace is not None and config.namespace != "public"

    connect_args = {}
    if is_custom_schema:
        connect_args["options"] = f"-csearch_path={config.namespace}"

    if config.ca_cert_path is not None:
        connect_args["sslrootcert"] = str(config.ca_cert_path)

    try:
        postgres_engine = create_engine(
            postgres_url, connect_args=connect_args, **kwargs
        )
    except Exception as e:
        logger.exception("Failed to create PostgreSQL engine")
        raise RuntimeError(f"PostgreSQL engine creation failed: {e}") from e

    if is_custom_schema:
        try:
            with postgres_engine.connect() as connection:
                connection.execute(
                    text(f'CREATE SCHEMA IF NOT EXISTS "{config.namespace}"')
                )
                connection.commit()
                logger.info("Schema '%s' created or already exists", config.namespace)
        except Exception as e:
            logger.exception("Failed to create schema '%s'", config.namespace)
            raise RuntimeError(
                f"Schema creation failed for '{config.namespace}': {e}"
            ) from e

    return postgres_engine


def build_engine(db_config: DatabaseConfiguration) -> Engine:
    """Create engine for the configured database type."""
    # Debug print all SQL statements if our logger is at-least DEBUG level
    echo = bool(logger.isEnabledFor(logging.DEBUG))

    create_engine_kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
    }

    match db_config.db_type:
        case constants.DATABASE_TYPE_SQLITE:
            logger.info("Initialize SQLite database")
            sqlite_config = db_config.config
            logger.debug("Configuration: %s", sqlite_config)
            assert isinstance(sqlite_config, SQLiteDatabaseConfiguration)
            return _create_sqlite_engine(sqlite_config, **create_engine_kwargs)
        case constants.DATABASE_TYPE_POSTGRES:
            logger.info("Initialize PostgreSQL database")
            postgres_config = db_config.config
            logger.debug("Configuration: %s", postgres_config)
            assert isinstance(postgres_config, PostgreSQLDatabaseConfiguration)
            return _create_postgres_engine(postgres_config, **create_engine_kwargs)
    raise ValueError(f"Unsupported database type: {db_config.db_type}")


def initialize_database() -> None:
    """Initialize the process-wide database engine from configuration."""
    global engine  # pylint: disable=global-statement

    engine = build_engine(configuration.database_configuration)


def dispose_database() -> None:
    """Close all pooled connections and forget the engine."""
    global engine  # pylint: disable=global-statement

    if engine is not None:
        engine.dispose()
        logger.info("Database connections closed")
    engine = None
