"""Base scheduler interface shared by the cohort scheduling modes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Sequence, Tuple

from visitplan.config import CohortRule, RunConfig
from visitplan.domain.models import CohortResult, PersonRecord, VisitAssignment
from visitplan.errors import CapacityExceededError
from visitplan.services.eligibility import eligible_pool
from visitplan.services.workdays import is_working_day


class BaseScheduler(ABC):
    """
    Abstract base class for cohort schedulers.

    ``make_schedule`` runs the steps common to every mode: population filter,
    capacity check, and the final split of the pool into assigned and
    unplanned people. Subclasses only decide who gets which dates.
    """

    mode: str | None = None  # Override in subclasses (e.g. "birthday")

    @abstractmethod
    def assign(
        self,
        pool: Sequence[PersonRecord],
        rule: CohortRule,
        cfg: RunConfig,
        result: CohortResult,
    ) -> Tuple[List[VisitAssignment], Sequence[PersonRecord]]:
        """
        Assign visit dates to people from the eligible pool.

        Args:
            pool: Eligible people in roster order
            rule: Cohort rule being scheduled
            cfg: RunConfig with target year and calendar
            result: Result under construction, for warnings

        Returns:
            Tuple of (assignments, people left unconsumed)
        """
        pass

    def get_mode_name(self) -> str:
        return self.mode or "UNKNOWN"

    def make_schedule(
        self,
        people: Sequence[PersonRecord],
        rule: CohortRule,
        cfg: RunConfig,
    ) -> CohortResult:
        """
        Schedule one cohort.

        Args:
            people: Whole roster (read-only)
            rule: Cohort rule to apply
            cfg: RunConfig shared by all cohorts

        Returns:
            CohortResult with assigned and unplanned people plus warnings

        Raises:
            CapacityExceededError: If manual monthly counts exceed the pool
        """
        result = CohortResult(rule=rule)
        pool = eligible_pool(people, rule)
        available = len(pool)

        if available == 0:
            result.warn(f"{rule.label}: no eligible population found.")
            return result

        if not rule.auto_distribute:
            planned = rule.planned_total
            if planned > available:
                raise CapacityExceededError(rule.label, planned, available)
            if planned < available:
                result.warn(
                    f"{rule.label}: plan ({planned}) is less than population ({available}); "
                    f"{available - planned} left unplanned."
                )

        assigned, remaining = self.assign(pool, rule, cfg, result)
        result.assigned.extend(assigned)
        result.unplanned.extend(remaining)
        self._check_working_days(result, cfg)
        return result

    @staticmethod
    def _check_working_days(result: CohortResult, cfg: RunConfig) -> None:
        # next_working_day keeps the original date when its window is exhausted
        for assignment in result.assigned:
            bad: List[date] = [
                d for d in assignment.dates
                if not is_working_day(d, cfg.holidays, cfg.saturday_working)
            ]
            if bad:
                days = ", ".join(d.isoformat() for d in bad)
                result.warn(
                    f"{result.rule.label}: no working day found near {days} "
                    f"for roster row {assignment.person.row_number}; date kept as is."
                )
