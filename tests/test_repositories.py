"""Tests for the plan output repository."""

import json
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from visitplan.config import CohortRule, RunConfig
from visitplan.domain.repositories import PlanRepository
from visitplan.domain.tables import Base
from visitplan.engine.orchestrator import Orchestrator


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def plan(make_people):
    people = make_people([date(2000, 3, 1)] * 3)
    cfg = RunConfig(target_year=2026, cohorts=(
        CohortRule(start_year=2000, end_year=2000, monthly_counts=(2,) + (0,) * 11),
    ))
    return Orchestrator().build_plan(people, cfg).plan


def test_save_and_load_plan(db_session, plan):
    """Test storing a plan and reading it back in order."""
    count = PlanRepository.save_plan(db_session, plan, 2026)
    assert count == 3

    entries = PlanRepository.get_by_year(db_session, 2026)
    assert [e.row_id for e in entries] == [1, 2, 3]
    first = entries[0]
    assert first.cohort == "2000-2000 (all)"
    assert first.visit_dates == "2026-01-01"
    assert first.birth_date == date(2000, 3, 1)
    assert first.gender == "male"
    assert json.loads(first.fields_json)["Full name"] == "Person 1"

    assert entries[2].unplanned is True
    assert entries[2].visit_dates == ""


def test_get_unplanned(db_session, plan):
    PlanRepository.save_plan(db_session, plan, 2026)
    unplanned = PlanRepository.get_unplanned(db_session, 2026)
    assert [e.roster_row for e in unplanned] == [3]


def test_delete_by_year(db_session, plan):
    """Test that deleting one year leaves other years untouched."""
    PlanRepository.save_plan(db_session, plan, 2026)
    PlanRepository.save_plan(db_session, plan, 2027)

    deleted = PlanRepository.delete_by_year(db_session, 2026)
    assert deleted == 3
    assert PlanRepository.get_by_year(db_session, 2026) == []
    assert len(PlanRepository.get_by_year(db_session, 2027)) == 3
