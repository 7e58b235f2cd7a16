"""Database session management with connection pooling"""

from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from bijoux_ledger.config import settings
from bijoux_ledger.domain.exceptions import StorageFailureError
from bijoux_ledger.infrastructure.database.models import SETTINGS_ROW_ID, Base, FinancialSettingsRow


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite needs cross-thread access for the API worker pool"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create missing tables and seed the single financial settings row"""
    Base.metadata.create_all(bind=bind)
    with Session(bind=bind) as db:
        if db.get(FinancialSettingsRow, SETTINGS_ROW_ID) is None:
            db.add(FinancialSettingsRow(id=SETTINGS_ROW_ID, total_capital_cents=0, total_collected_cents=0))
            db.commit()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Commit on success, roll back on any error.

    Raises:
        StorageFailureError: Wrapping any SQLAlchemy error
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageFailureError(f"Database error: {e}") from e
    except Exception:
        db.rollback()
        raise


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
