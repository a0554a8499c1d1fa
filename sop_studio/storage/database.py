from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sop_studio.config.settings import get_settings
from sop_studio.storage.models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def build_engine(url: str) -> Engine:
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)

    if url.startswith("sqlite"):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
    logger.info("Database schema ready at %s", engine.url.render_as_string(hide_password=True))


def get_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False, class_=Session)


def configure(url: Optional[str] = None) -> sessionmaker:
    """Create the process-wide engine and session factory (idempotent per URL)."""
    global _engine, _session_factory
    resolved = url or get_settings().database_url
    if _engine is not None and str(_engine.url) == resolved and _session_factory is not None:
        return _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = build_engine(resolved)
    init_db(_engine)
    _session_factory = get_session_factory(_engine)
    return _session_factory


def current_session_factory() -> sessionmaker:
    """The configured session factory, configuring from settings on first use."""
    return _session_factory or configure()


def get_engine() -> Engine:
    if _engine is None:
        configure()
    assert _engine is not None
    return _engine


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    session = (factory or current_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "build_engine",
    "init_db",
    "get_session_factory",
    "configure",
    "current_session_factory",
    "get_engine",
    "session_scope",
]
