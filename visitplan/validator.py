from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

import pandas as pd

from .domain.models import CohortResult, ConsolidatedPlan, PersonRecord
from .services.eligibility import eligible_pool


def validate_cohort_result(result: CohortResult, people: Sequence[PersonRecord]) -> None:
    # Partition: eligible pool == assigned + unplanned, nobody twice
    pool = eligible_pool(people, result.rule)
    seen = [a.person for a in result.assigned] + list(result.unplanned)
    ids = [id(p) for p in seen]
    if len(set(ids)) != len(ids):
        raise ValueError(f"{result.rule.label}: a person appears more than once in the result")
    if set(ids) != {id(p) for p in pool}:
        raise ValueError(
            f"{result.rule.label}: result covers {len(seen)} people but the eligible pool has {len(pool)}"
        )

    visit_count = result.rule.visit_count
    for assignment in result.assigned:
        dates = assignment.dates
        if len(dates) != visit_count:
            raise ValueError(
                f"{result.rule.label}: row {assignment.person.row_number} has {len(dates)} visits, "
                f"expected {visit_count}"
            )
        if any(later < earlier for earlier, later in zip(dates, dates[1:])):
            raise ValueError(f"{result.rule.label}: row {assignment.person.row_number} visits are not ascending")
        if not 1 <= assignment.month <= 12:
            raise ValueError(f"{result.rule.label}: invalid report month {assignment.month}")


def summarize_plan(plan: ConsolidatedPlan) -> str:
    if not plan.rows:
        return "No rows planned."
    df = pd.DataFrame(
        [
            {
                "cohort": row.cohort,
                "month": row.visits[0].month if row.visits[0] is not None else None,
                "unplanned": row.unplanned,
            }
            for row in plan.rows
        ]
    )
    planned = df[~df["unplanned"]].astype({"month": int})
    coverage = planned.groupby(["cohort", "month"]).size().unstack(fill_value=0)
    totals = df.groupby("cohort").agg(
        planned=("unplanned", lambda s: int((~s).sum())),
        unplanned=("unplanned", lambda s: int(s.sum())),
    )

    lines = ["First visits per month per cohort:"]
    lines.append(coverage.to_string() if not coverage.empty else "(none)")
    lines.append("")
    lines.append("Planned / unplanned per cohort:")
    lines.append(totals.to_string())
    return "\n".join(lines)


def analyze_population(people: Iterable[PersonRecord], today: date | None = None) -> pd.DataFrame:
    """Head counts per birth year (total, male, female) for plausible birth years."""
    current_year = (today or date.today()).year
    records = [
        {"year": p.birth_date.year, "female": p.is_female}
        for p in people
        if p.birth_date is not None and 1900 <= p.birth_date.year <= current_year
    ]
    if not records:
        return pd.DataFrame(columns=["total", "male", "female"]).rename_axis("year")
    df = pd.DataFrame(records)
    counts = df.groupby("year").agg(
        total=("female", "size"),
        female=("female", "sum"),
    )
    counts["male"] = counts["total"] - counts["female"]
    return counts[["total", "male", "female"]].astype(int).sort_index()
