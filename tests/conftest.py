"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from datetime import date, datetime

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weekplan.calendar.models import Session
from weekplan.db.models import Base
from weekplan.db.repository import SqlSessionStore

# Monday of the reference week used across tests
WEEK_START = date(2025, 1, 6)


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_session(
    start: str,
    duration: int = 60,
    label: str = "Run",
    session_id: int = 0,
    location: str = "Track",
) -> Session:
    """Build a session from an ISO start string (e.g. "2025-01-08T18:00")."""
    return Session(
        id=session_id,
        activity_label=label,
        starts_at=datetime.fromisoformat(start),
        location=location,
        duration_minutes=duration,
    )


@pytest.fixture
def week_start() -> date:
    return WEEK_START


@pytest.fixture(scope="function")
def session_factory():
    """Isolated in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    try:
        yield factory
    finally:
        engine.dispose()


@pytest.fixture
def store(session_factory) -> SqlSessionStore:
    return SqlSessionStore(session_factory)


@pytest.fixture
def build_session():
    """Session builder: build_session("2025-01-08T18:00", 60, label="Swim")."""
    return make_session
