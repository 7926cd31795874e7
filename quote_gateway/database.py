"""
Database connection and session management for the cache store.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Table, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def create_store_engine(database_url: str) -> Engine:
    """Build an engine; SQLite connections are shared across worker threads."""
    kwargs = {"pool_pre_ping": True, "echo": False}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine, table: Table):
    """Create the cache table if missing. Safe to call multiple times."""
    logger.info(f"Initializing cache table {table.name}...")
    table.metadata.create_all(bind=engine, tables=[table])
    logger.info("Cache table initialized successfully")


@contextmanager
def get_db_session(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Context manager for database sessions.
    Commits on success, rolls back and re-raises on failure.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        session.close()
