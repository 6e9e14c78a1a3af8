"""Scheduling engine with mode-specific cohort schedulers."""

from .base import BaseScheduler
from .birthday import BirthdayScheduler
from .consolidate import consolidate
from .distribution import DistributionScheduler
from .orchestrator import Orchestrator, build_visit_plan

__all__ = [
    "BaseScheduler",
    "BirthdayScheduler",
    "DistributionScheduler",
    "Orchestrator",
    "build_visit_plan",
    "consolidate",
]
