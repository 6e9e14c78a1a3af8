"""Database initialization and utilities."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .tables import Base


def create_db_engine(db_url: str = "sqlite:///visitplan.db", echo: bool = False):
    """Create SQLAlchemy engine."""
    return create_engine(db_url, echo=echo)


def get_session(db_url: str = "sqlite:///visitplan.db") -> Session:
    """Get a new database session, creating missing tables first."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)()
