"""
Database Configuration Module

This module builds the SQLAlchemy 2.0 engine and session factory for the
BookHaven API.

Lifecycle
=========
Nothing here is created at import time. `create_app()` calls
`create_db_engine()` and `create_session_factory()` once at process start
and stores both on `app.state`. Each request then gets its own session
through the `get_db` dependency:

1. Request arrives → create a new session from app.state.session_factory
2. Use session for all database operations in that request
3. Commit on success (services commit explicitly)
4. Close session when request ends (uncommitted work is discarded)
"""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookhaven.config import Settings


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover models for migrations.
    """
    pass


# =============================================================================
# Engine / Session Factory
# =============================================================================
def create_db_engine(settings: Settings) -> Engine:
    """
    Create the database engine for the configured URL.

    PostgreSQL gets a sized connection pool with pre-ping. SQLite (tests and
    quick local runs) gets a single shared connection so in-memory databases
    survive across sessions.

    Args:
        settings: Application settings

    Returns:
        SQLAlchemy Engine (no connection is opened until first use)
    """
    if settings.is_sqlite:
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.debug,
        )

    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=settings.debug,  # Log SQL in debug mode
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Create the session factory bound to an engine.

    - autocommit=False: services decide when to commit
    - autoflush=False: no implicit flush before queries
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields a session from the factory the application was built with and
    closes it when the request ends, even if an exception occurred.

    Usage in Routes:
        @router.get("/booklists")
        def list_booklists(db: DbSession):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(engine: Engine) -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    # Importing the models package registers every table on Base.metadata
    import bookhaven.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Never use in production.
    """
    import bookhaven.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
