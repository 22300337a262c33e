"""
SQLite engines for swap journals, one per database file, and
transactional sessions over them.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from swapagent.core.models import Base

_engines = {}


def get_engine(database_path: str) -> Engine:
    """
    Create (or reuse) the SQLAlchemy engine for a database file.

    Uses SQLite with WAL mode for better concurrency.
    """
    db_path = Path(database_path)
    key = str(db_path.resolve())
    if key in _engines:
        return _engines[key]

    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )

    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()

    _engines[key] = engine
    return engine


def init_db(database_path: str) -> None:
    """
    Initialize database schema.

    Creates all tables if they don't exist.
    """
    engine = get_engine(database_path)
    Base.metadata.create_all(engine)


@contextmanager
def session_scope(database_path: str) -> Generator[Session, None, None]:
    """
    Transactional session for one unit of work: commit on success,
    rollback on error. Loaded objects stay usable after the scope ends.

    Usage:
        with session_scope(journal.database_path) as session:
            session.add(record)
    """
    session = Session(bind=get_engine(database_path), expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

