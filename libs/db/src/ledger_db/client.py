"""Centralized SQLAlchemy engine/session helpers for the ledger database.

Usage
-----
from ledger_db.client import session_scope

with session_scope(database_url_override=url) as s:
    s.execute(...)
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from .models.ledger import Base

_DEFAULT_URL = "sqlite+pysqlite:///./.ledger/ledger.db"

# One engine (and session factory) per database URL.
_ENGINES: dict[str, Engine] = {}
_SESSION_MAKERS: dict[str, sessionmaker[Session]] = {}


def database_url(override: str | None = None) -> str:
    """Resolve the database URL: explicit override, ``LEDGER_DATABASE_URL``, default."""

    url = override or os.getenv("LEDGER_DATABASE_URL")
    if url and url.strip():
        return url.strip()
    return _DEFAULT_URL


def _ensure_sqlite_parent(url: str) -> None:
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    db_path = parsed.database
    if not db_path or db_path == ":memory:":
        return
    Path(db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)


def get_engine(*, database_url_override: str | None = None) -> Engine:
    """Return the shared engine for the resolved URL, creating it (and the schema) on first use."""

    url = database_url(database_url_override)
    engine = _ENGINES.get(url)
    if engine is not None:
        return engine

    _ensure_sqlite_parent(url)
    engine = create_engine(url, pool_pre_ping=True)
    Base.metadata.create_all(bind=engine)
    _ENGINES[url] = engine
    _SESSION_MAKERS[url] = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
    return engine


def get_session(*, database_url_override: str | None = None) -> Session:
    """Return a new SQLAlchemy session bound to the shared engine."""

    get_engine(database_url_override=database_url_override)
    return _SESSION_MAKERS[database_url(database_url_override)]()


@contextmanager
def session_scope(*, database_url_override: str | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = get_session(database_url_override=database_url_override)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Dispose every cached engine (used by tests and short-lived processes)."""

    for engine in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()
    _SESSION_MAKERS.clear()


__all__ = [
    "database_url",
    "dispose_engines",
    "get_engine",
    "get_session",
    "session_scope",
]
