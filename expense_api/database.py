"""Database configuration for the expense tracking backend."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import load_settings

LOG = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def build_engine(url: str) -> Engine:
    """Create an engine for ``url`` with dialect-appropriate options."""
    return create_engine(url, future=True, **_engine_kwargs(url))


DATABASE_URL = load_settings().database_url
engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

Base = declarative_base()


def configure_engine(url: str) -> Engine:
    """Point the module-level engine and session factory at ``url``."""
    global engine, DATABASE_URL

    previous = engine
    engine = build_engine(url)
    DATABASE_URL = url
    SessionLocal.configure(bind=engine)
    previous.dispose()
    LOG.info("Database engine bound to %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_db() -> None:
    """Create database tables if they do not already exist."""
    from . import models  # noqa: F401  # Import models for metadata registration

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Iterator[Session]:
    """FastAPI dependency that provides a database session."""
    with session_scope() as session:
        yield session
