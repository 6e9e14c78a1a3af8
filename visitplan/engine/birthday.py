"""Birthday-anchored scheduler: every visit lands on the person's birth day-of-month."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from visitplan.config import CohortRule, RunConfig
from visitplan.domain.models import CohortResult, PersonRecord, VisitAssignment
from visitplan.services.projection import project_birthday

from .base import BaseScheduler


class BirthdayScheduler(BaseScheduler):
    """
    Schedule every eligible person on their own birthday timeline.

    Nobody is left unplanned in this mode. Each person is reported under
    the month of their earliest projected visit.
    """

    mode = "birthday"

    def assign(
        self,
        pool: Sequence[PersonRecord],
        rule: CohortRule,
        cfg: RunConfig,
        result: CohortResult,
    ) -> Tuple[List[VisitAssignment], Sequence[PersonRecord]]:
        assignments = []
        for person in pool:
            dates = project_birthday(person.birth_date.day, rule.visit_count, cfg)
            assignments.append(VisitAssignment(person=person, dates=tuple(dates), month=dates[0].month))
        return assignments, []
