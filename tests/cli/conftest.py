"""Shared fixtures for CLI tests."""

import pytest
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from typer.testing import CliRunner

from weekplan.db.repository import SqlSessionStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'weekplan.db'}"


@pytest.fixture
def db_store(db_url):
    """Store reading the same database file the CLI writes."""
    engine = create_engine(db_url)
    try:
        yield SqlSessionStore(sessionmaker(bind=engine, expire_on_commit=False))
    finally:
        engine.dispose()


@pytest.fixture(autouse=True)
def reset_logger():
    """The CLI binds a sink to the runner's stderr; drop it after each test."""
    yield
    logger.remove()
