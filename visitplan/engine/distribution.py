"""Month/day distribution scheduler for manual and auto-distribution modes."""

from __future__ import annotations

import calendar
from typing import List, Sequence, Tuple

from visitplan.config import MONTHS_PER_YEAR, CohortRule, RunConfig
from visitplan.domain.models import CohortResult, PersonRecord, VisitAssignment
from visitplan.services.allocation import distribute
from visitplan.services.projection import project_cycle
from visitplan.services.workdays import working_days_of_month

from .base import BaseScheduler


class DistributionScheduler(BaseScheduler):
    """
    Spread a cohort across the working days of the target year.

    Monthly quotas come from the rule's ``monthly_counts`` (manual mode) or
    from an even split of the whole pool over 12 months (auto mode, used
    when ``visit_count > 1``). Each month's people are spread over that
    month's working days, earliest days first, and the rest of their visits
    are projected with the cycle projector.
    """

    mode = "distribution"

    def monthly_quotas(self, pool_size: int, rule: CohortRule) -> List[int]:
        if rule.auto_distribute:
            return distribute(pool_size, MONTHS_PER_YEAR)
        return list(rule.monthly_counts)

    def assign(
        self,
        pool: Sequence[PersonRecord],
        rule: CohortRule,
        cfg: RunConfig,
        result: CohortResult,
    ) -> Tuple[List[VisitAssignment], Sequence[PersonRecord]]:
        assignments: List[VisitAssignment] = []
        cursor = 0

        for month, quota in enumerate(self.monthly_quotas(len(pool), rule), start=1):
            if quota == 0:
                continue
            days = list(working_days_of_month(cfg.target_year, month, cfg.holidays, cfg.saturday_working))
            if not days:
                result.warn(
                    f"{rule.label}: {calendar.month_name[month]} {cfg.target_year} has no working days; "
                    f"its quota of {quota} was not scheduled."
                )
                continue

            batch = pool[cursor:cursor + quota]
            cursor += len(batch)
            if not batch:
                break

            offset = 0
            for day, count in zip(days, distribute(len(batch), len(days))):
                for person in batch[offset:offset + count]:
                    dates = project_cycle(day, rule.visit_count, cfg)
                    assignments.append(VisitAssignment(person=person, dates=tuple(dates), month=month))
                offset += count

        return assignments, pool[cursor:]
