"""Plain data models passed between the ingestion layer, the engine and the renderers."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from visitplan.config import CohortRule


def visit_columns(visit_count: int) -> List[str]:
    """Column names for a schema holding ``visit_count`` visit dates."""
    if visit_count <= 1:
        return ["Visit date"]
    return [f"Visit {i} date" for i in range(1, visit_count + 1)]


@dataclass(frozen=True, eq=False)
class PersonRecord:
    """One roster row plus the fields derived at ingestion."""

    row_number: int
    fields: Mapping[str, Any]
    birth_date: Optional[date] = None  # None when the roster value could not be parsed
    is_female: bool = False

    @property
    def gender(self) -> str:
        return "female" if self.is_female else "male"

    def __repr__(self) -> str:
        return f"<PersonRecord(row={self.row_number}, birth_date={self.birth_date}, gender='{self.gender}')>"


@dataclass(frozen=True)
class VisitAssignment:
    """A person bound to their ascending visit dates."""

    person: PersonRecord
    dates: Tuple[date, ...]
    month: int  # 1-12, the month sheet this person is reported under

    @property
    def first_visit(self) -> date:
        return self.dates[0]


@dataclass
class CohortResult:
    """Outcome of scheduling one cohort rule."""

    rule: CohortRule
    assigned: List[VisitAssignment] = field(default_factory=list)
    unplanned: List[PersonRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def eligible_count(self) -> int:
        return len(self.assigned) + len(self.unplanned)

    @property
    def visit_columns(self) -> List[str]:
        return visit_columns(self.rule.visit_count)

    def by_month(self) -> Dict[int, List[VisitAssignment]]:
        """Assigned people grouped by reporting month, in assignment order."""
        months: Dict[int, List[VisitAssignment]] = defaultdict(list)
        for assignment in self.assigned:
            months[assignment.month].append(assignment)
        return dict(sorted(months.items()))

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        print(f"[WARN] {message}")


@dataclass(frozen=True)
class PlanRow:
    """One row of the consolidated plan."""

    row_id: int
    cohort: str
    person: PersonRecord
    visits: Tuple[Optional[date], ...]
    unplanned: bool = False


@dataclass
class ConsolidatedPlan:
    """All cohorts' rows under a single renumbered, normalized schema."""

    rows: List[PlanRow]
    max_visits: int

    @property
    def visit_columns(self) -> List[str]:
        return visit_columns(self.max_visits)

    def __len__(self) -> int:
        return len(self.rows)

    def to_frame(self, field_order: List[str] | None = None, id_column: str = "No") -> pd.DataFrame:
        """
        Flatten the plan into a DataFrame for rendering.

        Args:
            field_order: Roster columns to emit, in order (default: first-seen order)
            id_column: Column that receives the renumbered id; prepended when
                it is not one of the roster columns

        Returns:
            DataFrame with roster fields, visit columns and an ``unplanned`` flag
        """
        if field_order is None:
            field_order = []
            for row in self.rows:
                for key in row.person.fields:
                    if key not in field_order:
                        field_order.append(key)
        if id_column not in field_order:
            field_order = [id_column] + list(field_order)

        records = []
        for row in self.rows:
            record: Dict[str, Any] = {key: row.person.fields.get(key) for key in field_order}
            record[id_column] = row.row_id
            record["Cohort"] = row.cohort
            for column, visit in zip(self.visit_columns, row.visits):
                record[column] = visit
            record["unplanned"] = row.unplanned
            records.append(record)

        columns = list(field_order) + ["Cohort"] + self.visit_columns + ["unplanned"]
        return pd.DataFrame.from_records(records, columns=columns)


@dataclass
class RunResult:
    """Everything one engine run produces."""

    config_target_year: int
    cohort_results: List[CohortResult]
    plan: ConsolidatedPlan

    @property
    def warnings(self) -> List[str]:
        return [w for result in self.cohort_results for w in result.warnings]
