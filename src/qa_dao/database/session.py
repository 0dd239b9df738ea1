"""
Engine and session factory construction.

The `async_sessionmaker` returned by `create_session_factory` is the shared pool
handle handed to every repository. Repositories only open sessions from it; they
never touch pool configuration.
"""

import logging

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from qa_dao.config.settings import Settings

logger = logging.getLogger(__name__)


def _install_sqlite_transaction_hooks(engine: AsyncEngine) -> None:
    """
    Make SQLite behave closely enough to PostgreSQL for the repositories.

    - foreign keys are off by default in SQLite; answers rely on them.
    - the driver's implicit BEGIN is disabled and every transaction starts with
      BEGIN IMMEDIATE, taking the write lock up front. SQLite ignores
      SELECT ... FOR UPDATE, so this is what serialises read-modify-write sequences.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine(
    database_url: str,
    *,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: float = 30.0,
    pool_pre_ping: bool = True,
) -> AsyncEngine:
    """
    Create the AsyncEngine.

    Pool sizing arguments are only passed for server databases; SQLite picks its
    own pool class and rejects them for in-memory databases.
    """
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    options: dict = {"echo": echo, "pool_pre_ping": pool_pre_ping}
    if not is_sqlite:
        options.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
        )

    engine = create_async_engine(url, **options)

    if is_sqlite:
        _install_sqlite_transaction_hooks(engine)

    logger.debug(
        "database.engine.created",
        extra={"backend": url.get_backend_name(), "driver": url.get_driver_name()},
    )
    return engine


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=settings.DB_POOL_PRE_PING,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: nothing is lazily reloaded after a commit
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
