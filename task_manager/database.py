"""Database engine and session configuration (SQLAlchemy)."""

import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from task_manager.entities import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory SQLite database is kept on a single connection so every
    session of the process sees the same data.
    """
    url = make_url(database_url)
    kwargs: dict = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create the task schema if it does not exist yet."""
    logger.info("Initializing database schema on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(engine)
    logger.info("Database schema is up to date")


def get_session(request: Request) -> Iterator[Session]:
    """Request-scoped unit of work.

    Closing the session discards anything that was not committed, so a
    request that fails or is abandoned before commit persists nothing.
    """
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()
