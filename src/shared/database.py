"""Storage layer: declarative base, engine lifecycle, sessions and unit of work.

A single ``Database`` holds the engine (and with it the connection pool) for
the whole process. The application initializes it at startup and disposes it
at shutdown; request handlers receive sessions through the ``get_session``
dependency instead of reaching for a global connection.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shared.config import get_settings

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and the session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self.init()
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def init(self) -> None:
        """Create the engine and session factory. Safe to call more than once."""
        if self._engine is not None:
            return

        kwargs = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url.rstrip("/").endswith("sqlite:"):
                # One shared connection, otherwise every checkout sees an empty database
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True

        engine = create_engine(self.url, **kwargs)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info("Database initialized", dialect=engine.dialect.name)

    def dispose(self) -> None:
        """Close every pooled connection and forget the engine."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database disposed")

    def session(self) -> Session:
        if self._session_factory is None:
            self.init()
        return self._session_factory()

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)


_database: Database | None = None


def get_database() -> Database:
    """Return the process-wide database, built from settings on first use."""
    global _database
    if _database is None:
        settings = get_settings()
        _database = Database(settings.database_url, echo=settings.database_echo)
    return _database


def set_database(database: Database) -> None:
    """Replace the process-wide database (tests use an in-memory one)."""
    global _database
    _database = database


def reset_database() -> None:
    """Dispose and forget the process-wide database."""
    global _database
    if _database is not None:
        _database.dispose()
    _database = None


def get_session() -> Iterator[Session]:
    """FastAPI dependency: one session per request, always closed.

    Closing a session rolls back whatever transaction is still open, so a
    request that dies halfway never leaves a partial commit behind.
    """
    session = get_database().session()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or nothing at all.

    Any exception (cancellation included) rolls the transaction back and is
    re-raised unchanged.
    """
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
