"""Ledger database engine and per-request sessions"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from welth_engine.config import settings

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_pool_size,
    pool_recycle=settings.db_pool_recycle_seconds,
)

# Guardian mutations are committed explicitly by the route
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """One session per request, closed after the response (and background tasks) finish"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
