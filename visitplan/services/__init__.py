"""Services for scheduling logic."""

from .allocation import distribute
from .eligibility import eligible_pool, is_eligible
from .projection import project_birthday, project_cycle
from .workdays import is_working_day, next_working_day, working_days_of_month

__all__ = [
    "distribute",
    "eligible_pool",
    "is_eligible",
    "project_birthday",
    "project_cycle",
    "is_working_day",
    "next_working_day",
    "working_days_of_month",
]
