"""Domain models and plan persistence layer."""

from .models import (
    CohortResult,
    ConsolidatedPlan,
    PersonRecord,
    PlanRow,
    RunResult,
    VisitAssignment,
    visit_columns,
)
from .repositories import PlanRepository
from .tables import Base, PlanEntry

__all__ = [
    "CohortResult",
    "ConsolidatedPlan",
    "PersonRecord",
    "PlanRow",
    "RunResult",
    "VisitAssignment",
    "visit_columns",
    "Base",
    "PlanEntry",
    "PlanRepository",
]
