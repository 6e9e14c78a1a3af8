"""Consolidator - merges all cohort results into a single renumbered plan."""

from __future__ import annotations

from typing import List, Sequence

from visitplan.domain.models import CohortResult, ConsolidatedPlan, PlanRow


def consolidate(results: Sequence[CohortResult]) -> ConsolidatedPlan:
    """
    Merge cohort results under the widest visit schema.

    Rows keep cohort input order and, within a cohort, assigned people
    before unplanned ones. Ids are renumbered 1..N across the whole plan.
    A cohort with fewer visits than the widest one fills the leading
    visit slots (a single visit lands in "Visit 1 date") and leaves the
    rest empty.

    Args:
        results: Cohort results in cohort input order

    Returns:
        ConsolidatedPlan sized to the maximum visit count
    """
    max_visits = max((result.rule.visit_count for result in results), default=1)
    rows: List[PlanRow] = []

    for result in results:
        label = result.rule.label
        for assignment in result.assigned:
            padding = (None,) * (max_visits - len(assignment.dates))
            rows.append(PlanRow(
                row_id=len(rows) + 1,
                cohort=label,
                person=assignment.person,
                visits=tuple(assignment.dates) + padding,
            ))
        for person in result.unplanned:
            rows.append(PlanRow(
                row_id=len(rows) + 1,
                cohort=label,
                person=person,
                visits=(None,) * max_visits,
                unplanned=True,
            ))

    return ConsolidatedPlan(rows=rows, max_visits=max_visits)
