"""
SQLAlchemy engine and session configuration.

The engine is built from ORCHESTRATOR_DATABASE_URL. SQLite URLs (used for
local development and tests) get a thread-safe connection setup; an
in-memory SQLite database shares a single connection so every session sees
the same tables.
"""

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from orchestrator.config.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _normalize_url(database_url: str) -> str:
    # Hosted Postgres providers hand out postgres:// URLs
    if database_url.startswith("postgres://"):
        return "postgresql://" + database_url[len("postgres://"):]
    return database_url


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL.

    Args:
        database_url: SQLAlchemy-compatible database URL
        echo: Log every SQL statement

    Returns:
        Configured Engine (no connection is opened yet)
    """
    url = _normalize_url(database_url)

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(url, echo=echo, pool_pre_ping=True, pool_recycle=3600)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_tables(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    from orchestrator.db import models  # noqa: F401  (registers the tables)

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error("Error creating database tables", error=str(e))
        raise
    logger.info("Database tables ready")


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a database session."""
    session_factory: sessionmaker = request.app.state.session_factory
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
