"""
Booking Audit - Database Connection Management
Pooled SQLAlchemy engine for the booking database (MySQL via PyMySQL).

Connections are opened read-only at the session level: the audit never
writes, and the server enforces it.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, Connection, URL
from sqlalchemy.orm import Session
from sqlalchemy.pool import QueuePool

from utils.config import (
    DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD,
    DB_POOL_SIZE, DB_POOL_MAX_OVERFLOW, DB_POOL_RECYCLE, DB_POOL_PRE_PING,
    config
)
from utils.logger import logger, log_database_error

# Booking timestamps are stored as UTC
SESSION_INIT = "SET time_zone='+00:00', SESSION transaction_read_only=1"


class DatabaseConnectionError(Exception):
    """Raised when the engine cannot be created."""
    pass


def build_url() -> URL:
    """Connection URL from config; URL.create() keeps the password out of logs."""
    return URL.create(
        drivername="mysql+pymysql",
        username=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_NAME,
        query={"charset": "utf8mb4", "init_command": SESSION_INIT},
    )


class DatabaseConnection:
    """
    Lazily created, process-wide connection pool.

    Pool: DB_POOL_SIZE connections plus DB_POOL_MAX_OVERFLOW, recycled after
    DB_POOL_RECYCLE seconds, pre-pinged before use.
    """

    def __init__(self):
        self._engine: Optional[Engine] = None

    def get_engine(self) -> Engine:
        """
        Raises:
            DatabaseConnectionError: If the engine cannot be created
        """
        if self._engine is not None:
            return self._engine

        try:
            self._engine = create_engine(
                build_url(),
                poolclass=QueuePool,
                pool_size=DB_POOL_SIZE,
                max_overflow=DB_POOL_MAX_OVERFLOW,
                pool_recycle=DB_POOL_RECYCLE,
                pool_pre_ping=DB_POOL_PRE_PING,
                hide_parameters=True,
            )
        except Exception as e:
            log_database_error(e, "Failed to create database engine")
            raise DatabaseConnectionError(f"Failed to create database engine: {e}") from e

        logger.info("Database connection pool initialized", extra={
            "host": DB_HOST,
            "database": DB_NAME,
            "pool_size": DB_POOL_SIZE,
            "environment": config.environment
        })
        return self._engine

    @contextmanager
    def get_connection(self) -> Generator[Connection, None, None]:
        """
        Example:
            >>> with db.get_connection() as conn:
            ...     total = conn.execute(text("SELECT COUNT(*) FROM bookings")).scalar()
        """
        connection = self.get_engine().connect()
        try:
            yield connection
        except Exception as e:
            log_database_error(e, "Query failed")
            raise
        finally:
            connection.close()

    def close(self):
        """Dispose of the pool (tests, worker shutdown)."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection pool closed")


# Global database connection instance
db = DatabaseConnection()


def get_db_connection():
    """Get database connection context manager."""
    return db.get_connection()


def create_db_session() -> Session:
    """
    Create a new ORM session for one audit run.

    The caller owns the session and must close it.
    """
    from models.base import create_session
    return create_session()
