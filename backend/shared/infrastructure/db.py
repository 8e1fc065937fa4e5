"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.
"""

from collections.abc import Callable, Generator

import os

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from shared.config.logging import get_logger
from shared.config.settings import DATABASE_URL
from shared.utils.exceptions import ConflictError, DatabaseError


logger = get_logger(__name__)


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


# Create engine with connection pooling and timeouts
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=_calculate_pool_size(),
    max_overflow=15,
    pool_timeout=30,  # Wait max 30s for connection from pool
    pool_recycle=1800,  # Recycle connections after 30 minutes
    connect_args={"connect_timeout": 10},
    echo=False,
)

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/courses")
        def list_courses(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _run_guarded(db: Session, action: Callable[[], None], operation: str) -> None:
    try:
        action()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(
            f"Constraint violation during {operation}",
            operation=operation,
            error=str(e.orig),
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Database write failed", operation=operation, exc_info=True)
        raise DatabaseError(operation, error=str(e)) from e


def safe_commit(db: Session, operation: str = "commit") -> None:
    """
    Commit with automatic rollback on failure.

    Constraint violations surface as ConflictError (409), any other
    database failure as DatabaseError (500).
    """
    _run_guarded(db, db.commit, operation)


def safe_flush(db: Session, operation: str = "flush") -> None:
    """Flush pending changes with the same error mapping as safe_commit."""
    _run_guarded(db, db.flush, operation)
