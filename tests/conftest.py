"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from visitplan.domain.models import PersonRecord


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def make_people():
    """Factory building roster records with consecutive row numbers."""
    def _make(birth_dates, female=False, start_row=1):
        people = []
        for i, birth in enumerate(birth_dates):
            row = start_row + i
            people.append(PersonRecord(
                row_number=row,
                fields={"No": row, "Full name": f"Person {row}", "Birth date": birth},
                birth_date=birth,
                is_female=female,
            ))
        return people
    return _make


@pytest.fixture
def january_2026_holidays():
    """Holidays leaving only Jan 5-9 2026 (Mon-Fri) as January working days."""
    days = [1, 2] + list(range(12, 17)) + list(range(19, 24)) + list(range(26, 31))
    return frozenset(date(2026, 1, d) for d in days)
