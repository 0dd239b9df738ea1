"""
Core pytest configuration for the test suite.

This module only holds the database setup and logging install shared by every
test package. Repository fixtures live in tests/test_fixtures/repository_fixtures.py
and are imported at the bottom of this file so they are available everywhere.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Keep this block above the qa_dao imports so Faker and SQLAlchemy do not spam the
# output during collection.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "sqlalchemy.pool",
    "asyncio",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from pytest import FixtureRequest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from qa_dao.config import get_settings
from qa_dao.core.logging.builder import setup_logging
from qa_dao.database import Base, create_engine, create_session_factory
from qa_dao import models  # noqa: F401 – registers the tables with Base.metadata

settings = get_settings()
logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install the package logging configuration once for the session.

    dictConfig replaces the root handlers, so pytest's capture handler is put back
    afterwards for tests that assert on `caplog.records`.
    """
    setup_logging(settings)

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None:
        logging.getLogger().addHandler(handler)

    yield


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------


def safe_log_db_url(db_url: str) -> str:
    """Strip credentials from a database URL before logging it."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url(tmp_path) -> str:
    """
    Determine the database URL for one test.

    1. `TEST_DATABASE_URL` environment variable (CI override)
    2. settings.DATABASE_URL when TESTING=true and TEST_POSTGRES_DB is set
    3. a throwaway SQLite file under the test's tmp_path
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return f"sqlite+aiosqlite:///{tmp_path / 'qa_dao_test.db'}"


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh schema per test.

    Repositories commit their own transactions, so the usual rollback-per-test
    trick does not apply; tables are created before and dropped after each test.
    """
    url = get_test_database_url(tmp_path)
    logger.debug(f"Using test DB: {safe_log_db_url(url)}")

    engine = create_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(async_engine)


@pytest.fixture()
def executed_statements(async_engine: AsyncEngine):
    """
    Record every SQL statement sent to the test database after this fixture is set up.

    Used to prove an operation rejected its input without contacting the store.
    """
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(async_engine.sync_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(async_engine.sync_engine, "before_cursor_execute", _record)


@pytest.fixture()
async def unavailable_session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory whose every connection attempt fails.

    SQLite cannot open a database file inside a directory that does not exist.
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'qa.db'}")
    yield create_session_factory(engine)
    await engine.dispose()


# Repository test fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402
    question_repository,
    answer_repository,
    new_question,
    make_new_question,
    created_question_id,
    multiple_question_ids,
    created_answer_ids,
    insert_question_row,
    insert_answer_row,
)
