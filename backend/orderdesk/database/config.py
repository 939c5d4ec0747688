"""
Database configuration and connection management for the order desk.

This module provides RDBMS-agnostic database configuration with support for:
- SQLite (default for local development and tests)
- MySQL/MariaDB via PyMySQL (the production schema's native home)

Configuration is loaded from environment variables with sensible defaults.
A DatabaseConfig owns one engine and its bounded connection pool; it is
constructed once at startup, handed to every service, and closed at shutdown.
"""

import os
import logging
from typing import Optional, Dict, Any
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool
from sqlalchemy.exc import SQLAlchemyError
from contextlib import contextmanager
from pathlib import Path

from .models import create_all_tables, drop_all_tables

# Configure logging
logger = logging.getLogger(__name__)


class DatabaseConfig:
    """
    Database configuration manager supporting multiple RDBMS backends.

    Server databases get a QueuePool of fixed capacity (10 by default) with
    no overflow, so requests beyond capacity wait for a connection instead
    of opening new ones. SQLite uses a single shared connection.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        pool_timeout: Optional[int] = None,
        pool_recycle: Optional[int] = None,
    ):
        """
        Initialize database configuration.

        Args:
            database_url: Optional database URL override
            echo: Enable SQL query logging for debugging
            pool_size: Pool capacity override (default DB_POOL_SIZE or 10)
            max_overflow: Extra connections beyond capacity (default DB_MAX_OVERFLOW or 0)
            pool_timeout: Seconds to wait for a pooled connection (default DB_POOL_TIMEOUT or 30)
            pool_recycle: Seconds before a pooled connection is replaced (default DB_POOL_RECYCLE or 3600)
        """
        self.database_url = database_url or self._build_database_url()
        self.echo = echo
        self.pool_size = pool_size if pool_size is not None else int(os.getenv('DB_POOL_SIZE', '10'))
        self.max_overflow = max_overflow if max_overflow is not None else int(os.getenv('DB_MAX_OVERFLOW', '0'))
        self.pool_timeout = pool_timeout if pool_timeout is not None else int(os.getenv('DB_POOL_TIMEOUT', '30'))
        self.pool_recycle = pool_recycle if pool_recycle is not None else int(os.getenv('DB_POOL_RECYCLE', '3600'))
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        self._is_initialized = False

        # Database-specific configuration
        self.db_type = self._detect_database_type()
        self.engine_kwargs = self._get_engine_kwargs()

        logger.info(f"Database configuration initialized for {self.db_type}")

    def _build_database_url(self) -> str:
        """
        Build database URL from environment variables.

        Environment variables:
        - DATABASE_URL: Complete database URL (takes precedence)
        - DB_TYPE: Database type (sqlite, mysql)
        - DB_HOST: Database host (default: localhost)
        - DB_PORT: Database port (default: varies by type)
        - DB_NAME: Database name (default: orderdesk)
        - DB_USER: Database username
        - DB_PASSWORD: Database password

        Returns:
            Complete database URL string
        """
        database_url = os.getenv('DATABASE_URL')
        if database_url:
            return database_url

        db_type = os.getenv('DB_TYPE', 'sqlite').lower()

        if db_type == 'sqlite':
            db_name = os.getenv('DB_NAME', 'orderdesk.db')
            # Keep the database file next to the backend package
            db_path = Path(__file__).parent.parent / db_name
            return f"sqlite:///{db_path}"

        elif db_type in ['mysql', 'mariadb']:
            host = os.getenv('DB_HOST', 'localhost')
            port = os.getenv('DB_PORT', '3306')
            database = os.getenv('DB_NAME', 'orderdesk')
            username = os.getenv('DB_USER', 'root')
            password = os.getenv('DB_PASSWORD', '')

            return f"mysql+pymysql://{username}:{password}@{host}:{port}/{database}?charset=utf8mb4"

        else:
            raise ValueError(f"Unsupported database type: {db_type}")

    def _detect_database_type(self) -> str:
        """Detect database type from URL."""
        if self.database_url.startswith('sqlite'):
            return 'sqlite'
        elif self.database_url.startswith('mysql'):
            return 'mysql'
        else:
            return 'unknown'

    def _get_engine_kwargs(self) -> Dict[str, Any]:
        """
        Get database-specific engine configuration.

        Returns:
            Dictionary of engine configuration parameters
        """
        kwargs = {
            'echo': self.echo,
            'future': True,
        }

        if self.db_type == 'sqlite':
            kwargs.update({
                'poolclass': StaticPool,
                'connect_args': {
                    'check_same_thread': False,
                    'timeout': 30,
                },
                'pool_pre_ping': True,
            })

        elif self.db_type == 'mysql':
            kwargs.update({
                'poolclass': QueuePool,
                'pool_size': self.pool_size,
                'max_overflow': self.max_overflow,
                'pool_timeout': self.pool_timeout,
                'pool_recycle': self.pool_recycle,
                'pool_pre_ping': True,
                'connect_args': {
                    'charset': 'utf8mb4',
                    'connect_timeout': 30,
                },
            })

        return kwargs

    def initialize(self) -> None:
        """
        Initialize database engine and session factory.

        Raises:
            SQLAlchemyError: If database connection fails
        """
        if self._is_initialized:
            return

        try:
            self.engine = create_engine(self.database_url, **self.engine_kwargs)

            # Listeners must be in place before the first connection is made
            self._setup_event_listeners()

            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine,
                expire_on_commit=False
            )

            self._is_initialized = True
            logger.info(f"Database engine initialized successfully ({self.db_type})")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise SQLAlchemyError(f"Database initialization failed: {e}")

    def _setup_event_listeners(self) -> None:
        """Set up SQLAlchemy event listeners for connection management."""

        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Enforce foreign keys on SQLite so bad references fail the write."""
            if self.db_type == 'sqlite':
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        @event.listens_for(self.engine, "engine_connect")
        def receive_engine_connect(conn):
            logger.debug("Database connection established")

    def create_tables(self) -> None:
        """
        Create all database tables if they don't exist.

        Raises:
            SQLAlchemyError: If table creation fails
        """
        if not self._is_initialized:
            self.initialize()

        try:
            create_all_tables(self.engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create tables: {e}")
            raise SQLAlchemyError(f"Table creation failed: {e}")

    def drop_tables(self) -> None:
        """Drop all database tables."""
        if not self._is_initialized:
            self.initialize()

        drop_all_tables(self.engine)
        logger.info("Database tables dropped")

    def get_session(self) -> Session:
        """
        Get a new database session.

        Returns:
            SQLAlchemy session instance

        Raises:
            SQLAlchemyError: If session creation fails
        """
        if not self._is_initialized:
            self.initialize()

        try:
            return self.SessionLocal()
        except Exception as e:
            logger.error(f"Failed to create session: {e}")
            raise SQLAlchemyError(f"Session creation failed: {e}")

    @contextmanager
    def get_session_context(self):
        """
        Get a database session that runs as one transaction.

        The session holds a single pooled connection for the whole block.
        It commits when the block exits normally and rolls back on any
        exception before re-raising it.

        Usage:
            with db_config.get_session_context() as session:
                # Use session here
                pass

        Yields:
            SQLAlchemy session with automatic commit/rollback
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            if not self._is_initialized:
                self.initialize()

            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    def get_connection_info(self) -> Dict[str, Any]:
        """
        Get database connection information for monitoring.

        Returns:
            Dictionary with connection details
        """
        info = {
            'database_type': self.db_type,
            'database_url': self.database_url.split('@')[-1] if '@' in self.database_url else self.database_url,
            'is_initialized': self._is_initialized,
            'echo_enabled': self.echo,
        }

        if self.engine and hasattr(self.engine.pool, 'size'):
            info.update({
                'pool_size': self.engine.pool.size(),
                'checked_in': self.engine.pool.checkedin(),
                'checked_out': self.engine.pool.checkedout(),
            })

        return info

    def close(self) -> None:
        """Close database connections and clean up resources."""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connections closed")
        self._is_initialized = False


def initialize_database(
    database_url: Optional[str] = None,
    echo: bool = False,
    create_tables: bool = True,
    **pool_kwargs: Any,
) -> DatabaseConfig:
    """
    Build and open a DatabaseConfig, optionally creating the schema.

    Args:
        database_url: Optional database URL override
        echo: Enable SQL query logging
        create_tables: Whether to create tables automatically
        **pool_kwargs: pool_size, max_overflow, pool_timeout, pool_recycle overrides

    Returns:
        Initialized DatabaseConfig instance
    """
    db_config = DatabaseConfig(database_url=database_url, echo=echo, **pool_kwargs)
    db_config.initialize()

    if create_tables:
        db_config.create_tables()

    return db_config


__all__ = [
    'DatabaseConfig',
    'initialize_database',
]
