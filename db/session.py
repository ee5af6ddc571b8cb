"""
db/session.py

Lazily built engine and session factory for the users store.

Nothing connects at import time; the engine is created on the first call to
``get_engine`` and released by ``dispose_engine`` at shutdown.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import PoolSettings, load_pool_settings, resolve_database_url

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def create_db_engine(
    database_url: str | None = None,
    pool: PoolSettings | None = None,
) -> Engine:
    url = database_url or resolve_database_url()
    if not url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    pool = pool or load_pool_settings()
    return create_engine(
        url,
        echo=pool.echo,
        pool_pre_ping=True,
        pool_size=pool.pool_size,
        max_overflow=pool.max_overflow,
        pool_timeout=pool.pool_timeout,
        pool_recycle=pool.pool_recycle,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker:
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
    """Open a new session on the shared engine."""
    return get_session_factory()()


def dispose_engine() -> bool:
    """
    Close every pooled connection and forget the engine.

    Returns False when no engine was ever created.
    """

    global _engine, _session_factory
    if _engine is None:
        return False
    _engine.dispose()
    _engine = None
    _session_factory = None
    return True
