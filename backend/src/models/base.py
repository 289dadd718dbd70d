"""
SQLAlchemy ORM Base Configuration
Provides declarative base and session management for ORM models.

IMPORTANT: Engine is imported from database.connection to ensure single source of truth.
"""

from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


def _get_engine():
    """
    Get the SQLAlchemy engine from database.connection.

    Lazy import to avoid circular dependencies during module initialization.
    """
    from database.connection import db
    return db.get_engine()


# Session factory for manual session creation (cron jobs, scripts).
# The engine is bound per session so importing models never touches the database.
SessionLocal = sessionmaker(
    expire_on_commit=False,  # Allow access to objects after commit
    autoflush=True,
)


def create_session():
    """
    Factory for read-only audit sessions (CLI, API requests).

    Usage:
        session = create_session()
        try:
            total = BookingRepository(session).count()
        finally:
            session.close()

    Returns:
        SQLAlchemy Session instance
    """
    return SessionLocal(bind=_get_engine())
