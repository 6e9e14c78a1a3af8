"""Cohort population filter."""

from __future__ import annotations

from typing import Iterable, List

from visitplan.config import CohortRule
from visitplan.domain.models import PersonRecord


def is_eligible(person: PersonRecord, rule: CohortRule) -> bool:
    """
    Check if a person belongs to a cohort's eligible pool.

    Args:
        person: Roster record with derived birth date and gender
        rule: Cohort rule providing the birth-year range and gender filter

    Returns:
        True if the birth date is valid, its year is within
        [start_year, end_year] and the gender filter matches
    """
    if person.birth_date is None:
        return False
    if not rule.start_year <= person.birth_date.year <= rule.end_year:
        return False
    if rule.gender != "all" and person.gender != rule.gender:
        return False
    return True


def eligible_pool(people: Iterable[PersonRecord], rule: CohortRule) -> List[PersonRecord]:
    """Eligible people for ``rule`` in roster order."""
    return [person for person in people if is_eligible(person, rule)]
