"""Database engine and session management."""

from sqlmodel import create_engine, Session, SQLModel
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from typing import Generator, Optional

from taskboard.config import DATABASE_URL, SQL_ECHO

# Registers the tables on SQLModel.metadata
from taskboard.models import models  # noqa: F401


def create_database_engine(database_url: Optional[str] = None, echo: bool = SQL_ECHO) -> Engine:
    """Create database engine with appropriate settings."""
    database_url = database_url or DATABASE_URL

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": 30}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(
        database_url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
    )


def init_database(engine: Engine) -> None:
    """Initialize database tables."""
    SQLModel.metadata.create_all(engine)


@contextmanager
def atomic(session: Session) -> Generator[Session, None, None]:
    """Commit everything written inside the block, or roll all of it back."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


@contextmanager
def session_scope(engine: Engine) -> Generator[Session, None, None]:
    """Standalone session with commit on success, used outside of requests."""
    session = Session(engine)
    try:
        with atomic(session):
            yield session
    finally:
        session.close()
