"""Database engine and session helpers for the service store."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base


DEFAULT_DB_URL = "sqlite:///maintenance.db"


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False):
    return create_engine(db_url, echo=echo)


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Create the services, settings, notes and history tables."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    print(f"[INFO] Database initialized: {db_url}")


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Get a new session bound to ``db_url``."""
    return sessionmaker(bind=create_db_engine(db_url))()


@contextmanager
def session_scope(db_url: str = DEFAULT_DB_URL) -> Iterator[Session]:
    """
    Yield a session that is rolled back and closed on error.

    Repositories commit their own writes unless called with ``commit=False``;
    this only guarantees cleanup.
    """
    session = get_session(db_url)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
