"""SQLAlchemy models for persisted plan output."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Date, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class PlanEntry(Base):
    """One row of a consolidated plan, stored for downstream reporting."""

    __tablename__ = "plan_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    target_year = Column(Integer, nullable=False, index=True)
    row_id = Column(Integer, nullable=False)  # renumbered id within the plan
    cohort = Column(String(50), nullable=False)
    roster_row = Column(Integer, nullable=False)
    birth_date = Column(Date, nullable=True)
    gender = Column(String(10), nullable=False)
    unplanned = Column(Boolean, nullable=False, default=False)
    visit_dates = Column(Text, nullable=True)  # ISO dates joined with ";"
    fields_json = Column(Text, nullable=True)  # original roster fields

    def __repr__(self) -> str:
        return f"<PlanEntry(year={self.target_year}, row={self.row_id}, cohort='{self.cohort}')>"
