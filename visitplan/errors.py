"""Error types raised by the visit planner."""

from __future__ import annotations


class ConfigError(ValueError):
    """Raised when a run configuration cannot be loaded or is invalid."""


class CapacityExceededError(RuntimeError):
    """Manual monthly plan asks for more people than the cohort has.

    Fatal for the whole run: no cohort output is produced.
    """

    def __init__(self, cohort: str, planned: int, available: int):
        self.cohort = cohort
        self.planned = planned
        self.available = available
        super().__init__(
            f"{cohort}: planned total ({planned}) exceeds available population ({available})"
        )


class RunCancelledError(RuntimeError):
    """Raised between cohorts when the caller asked the run to stop."""
