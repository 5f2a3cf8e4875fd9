"""
db/session.py

Engine and sessions for the detection store.

Every consumer in this project only reads ``detected_droppings``:

    MonthlyHealthService   one short-lived session per record fetch
    monthly_health_report  one session for the whole CLI run
    app.main lifespan      connectivity and schema checks

so :func:`read_session` never commits and always rolls back before the
connection goes back to the pool. The engine is built on first use; importing
this module does not touch the database.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url

# Chart reads are small and bursty; the pool stays modest unless overridden.
DEFAULT_POOL_SIZE = 5
DEFAULT_MAX_OVERFLOW = 10
DEFAULT_POOL_RECYCLE_SECONDS = 1800


def _get_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def create_db_engine() -> Engine:
    """
    Build the PostgreSQL engine for the detection store.

    ``detections_count`` is a JSONB column, so any other backend is rejected
    up front instead of failing on the first query.
    """

    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        raise RuntimeError(
            "The detection store requires PostgreSQL (JSONB detection counts); "
            f"got URL scheme {database_url.split(':', 1)[0]!r}."
        )

    return create_engine(
        database_url,
        echo=_get_bool_env("SQL_ECHO", default=False),
        pool_pre_ping=True,
        pool_recycle=_get_int_env("DB_POOL_RECYCLE", DEFAULT_POOL_RECYCLE_SECONDS),
        pool_size=_get_int_env("DB_POOL_SIZE", DEFAULT_POOL_SIZE),
        max_overflow=_get_int_env("DB_MAX_OVERFLOW", DEFAULT_MAX_OVERFLOW),
    )


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def _get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            class_=Session,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


def SessionLocal() -> Session:
    """Open a new session on the detection store."""
    return _get_session_factory()()


@contextmanager
def read_session() -> Iterator[Session]:
    """
    Yield a session for reading detection records.

    The transaction is rolled back and the session closed on exit, whether
    or not the body raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
