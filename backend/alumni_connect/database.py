"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (local work and tests).
Sync usage; one session per request via get_db. Multi-step writes go through transaction().
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from alumni_connect.config import settings
from alumni_connect.errors import DomainError, StorageFailure
from alumni_connect import metrics

logger = logging.getLogger(__name__)

_is_sqlite = "sqlite" in settings.database_url
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
engine = create_engine(
    settings.database_url,
    pool_pre_ping=not _is_sqlite,
    connect_args=_connect_args,
    echo=False,  # Set True for SQL logging during development
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(bind=None) -> None:
    """Create tables when using SQLite (PostgreSQL goes through Alembic). Call once at startup."""
    if bind is None and not _is_sqlite:
        return
    # Import all models so they register with Base before create_all
    from alumni_connect.models import university, user, connection, mentor, notification  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Dependency: yield a DB session, close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block of writes as one transaction: commit if the block returns, roll back
    everything if it raises. DomainErrors pass through unchanged; SQLAlchemy errors
    surface as StorageFailure so callers never see driver text.
    """
    try:
        yield db
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        metrics.increment("storage_failures_total")
        logger.exception("Transaction rolled back: %s", e)
        raise StorageFailure() from e
    except Exception:
        db.rollback()
        raise
