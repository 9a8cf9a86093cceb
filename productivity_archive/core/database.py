"""Database connection and session management."""

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from productivity_archive.config import get_settings
from productivity_archive.models.base import Base


def build_engine(database_url: Optional[str] = None, **kwargs: Any) -> Engine:
    """Create an engine with pool settings suited to the backend."""
    settings = get_settings()
    url = database_url or settings.database_url
    options: Dict[str, Any] = {"echo": settings.debug}

    if url.startswith("sqlite"):
        # SQLite doesn't support these pool settings
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    options.update(kwargs)
    return create_engine(url, **options)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(
        bind=engine,
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


sync_engine = build_engine()
SessionLocal = build_session_factory(sync_engine)


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a database session."""
    with session_scope() as db:
        yield db


def init_db(engine: Optional[Engine] = None) -> None:
    """Initialize database with tables."""
    Base.metadata.create_all(bind=engine or sync_engine)


def drop_db(engine: Optional[Engine] = None) -> None:
    """Drop all database tables (use with caution)."""
    Base.metadata.drop_all(bind=engine or sync_engine)
