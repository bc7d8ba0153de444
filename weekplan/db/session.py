from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from weekplan.config.settings import settings
from weekplan.db.models import Base

# Lazy initialization to avoid import-time database connections
_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _build_engine(database_url: str) -> Engine:
    connect_args = {}
    if "sqlite" in database_url.lower():
        connect_args = {"check_same_thread": False}
    return create_engine(database_url, connect_args=connect_args, echo=False)


def _get_engine() -> Engine:
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")
        _engine = _build_engine(settings.database_url)
    return _engine


def get_engine() -> Engine:
    """Get or create the database engine (public API)."""
    return _get_engine()


def configure_engine(database_url: str) -> Engine:
    """Replace the engine and session factory, e.g. for a CLI --db option."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = _build_engine(database_url)
    _SessionLocal = None
    logger.info(f"Database engine configured: {database_url}")
    return _engine


def _get_session_local() -> sessionmaker[Session]:
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=_get_engine())
        logger.debug("Database session factory initialized")
    return _SessionLocal


def init_db(engine: Engine | None = None) -> None:
    """Create all tables if they do not exist."""
    Base.metadata.create_all(engine or _get_engine())
    logger.info("Database schema ensured")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager.

    Commits on success; on any error the session is rolled back, the error
    logged and re-raised.
    """
    session = _get_session_local()()
    try:
        yield session
        session.commit()
        logger.debug("Database session committed successfully")
    except Exception as e:
        logger.error(f"Database session error, rolling back: {e}. Error type: {type(e).__name__}")
        session.rollback()
        raise
    finally:
        session.close()
