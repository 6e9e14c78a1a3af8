"""Orchestrator - runs every cohort rule and consolidates the results into one plan."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Sequence

from visitplan.config import CohortRule, RunConfig
from visitplan.domain.models import CohortResult, PersonRecord, RunResult
from visitplan.errors import RunCancelledError
from visitplan.validator import validate_cohort_result

from .base import BaseScheduler
from .birthday import BirthdayScheduler
from .consolidate import consolidate
from .distribution import DistributionScheduler


class Orchestrator:
    """
    Orchestrator coordinates the cohort schedulers.

    Cohorts are scheduled one after another in configuration order; each
    only reads the shared roster. The results are then merged by the
    consolidator.
    """

    def __init__(self, cancel: Callable[[], bool] | None = None):
        """
        Initialize orchestrator.

        Args:
            cancel: Optional callable polled between cohorts; returning True
                aborts the run with RunCancelledError
        """
        self.cancel = cancel

    @staticmethod
    def scheduler_for(rule: CohortRule) -> BaseScheduler:
        if rule.use_birthday:
            return BirthdayScheduler()
        return DistributionScheduler()

    def build_plan(self, people: Sequence[PersonRecord], cfg: RunConfig) -> RunResult:
        """
        Build the full visit plan for a roster.

        Args:
            people: Roster records (read-only)
            cfg: RunConfig

        Returns:
            RunResult with one CohortResult per rule and the consolidated plan

        Raises:
            CapacityExceededError: If a manual cohort plan exceeds its population
            RunCancelledError: If ``cancel`` asked to stop between cohorts
        """
        print(f"[INFO] Orchestrator: Building plan for {cfg.target_year}")
        print(f"[INFO] {len(people)} roster rows, {len(cfg.cohorts)} cohorts")

        results: List[CohortResult] = []
        for rule in cfg.cohorts:
            if self.cancel is not None and self.cancel():
                raise RunCancelledError(f"Run cancelled before cohort {rule.label}")

            scheduler = self.scheduler_for(rule)
            print(f"\n[INFO] Scheduling cohort {rule.label} ({scheduler.get_mode_name()} mode)...")
            try:
                result = scheduler.make_schedule(people, rule, cfg)
            except RuntimeError as e:
                print(f"[ERROR] Cohort {rule.label} failed: {e}")
                raise

            validate_cohort_result(result, people)
            results.append(result)
            print(
                f"[OK] Cohort {rule.label}: {len(result.assigned)} planned, "
                f"{len(result.unplanned)} unplanned"
            )

        plan = consolidate(results)
        print(f"[OK] Orchestrator: Consolidated plan has {len(plan)} rows")
        return RunResult(config_target_year=cfg.target_year, cohort_results=results, plan=plan)


def build_visit_plan(
    people: Sequence[PersonRecord],
    cfg: RunConfig,
    out_dir: str | Path | None = None,
    db_url: str | None = None,
    field_order: List[str] | None = None,
    id_column: str | None = None,
) -> RunResult:
    """
    Convenience function to run the engine and write its outputs.

    Args:
        people: Roster records
        cfg: RunConfig
        out_dir: If given, write the zip archive of workbooks there
        db_url: If given, persist the consolidated rows to this database
        field_order: Roster columns to emit in outputs
        id_column: Roster column holding the row number to renumber

    Returns:
        RunResult
    """
    result = Orchestrator().build_plan(people, cfg)

    if out_dir is not None:
        from visitplan.io.export_xlsx import write_archive

        archive = write_archive(result, out_dir, field_order=field_order, id_column=id_column)
        print(f"[INFO] Wrote archive {archive}")

    if db_url is not None:
        from visitplan.domain.db import get_session
        from visitplan.domain.repositories import PlanRepository

        session = get_session(db_url)
        try:
            deleted = PlanRepository.delete_by_year(session, cfg.target_year)
            if deleted > 0:
                print(f"[INFO] Deleted {deleted} existing plan rows for {cfg.target_year}")
            count = PlanRepository.save_plan(session, result.plan, cfg.target_year)
            print(f"[INFO] Persisted {count} plan rows to database")
        finally:
            session.close()

    return result
