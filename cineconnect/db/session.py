"""Database session management."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from starlette.requests import HTTPConnection

from cineconnect.core.config import Settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url, *, echo: bool = False, pool_size: int | None = None) -> Engine:
    """Create an engine; SQLite gets FK enforcement so cascades match PostgreSQL."""
    is_sqlite = str(url).startswith("sqlite")
    kwargs: dict = {"pool_pre_ping": True, "echo": echo}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    elif pool_size:
        kwargs["pool_size"] = pool_size
    engine = create_engine(url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """Owns the engine and session factory for the lifetime of the process."""

    def __init__(self, settings: Settings) -> None:
        self.engine = build_engine(
            settings.sqlalchemy_url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
        )
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()


def get_db(connection: HTTPConnection) -> Iterator[Session]:
    """Dependency for FastAPI to get DB session."""
    db = connection.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
