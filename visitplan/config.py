"""Load and validate run configuration (YAML, or JSON by file suffix)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Tuple

import yaml

from .errors import ConfigError


GENDERS = ("all", "male", "female")
MONTHS_PER_YEAR = 12

# Keys sent by the legacy browser form.
_KEY_ALIASES = {
    "targetYear": "target_year",
    "saturdayWorking": "saturday_working",
    "ranges": "cohorts",
    "startYear": "start_year",
    "endYear": "end_year",
    "visitCount": "visit_count",
    "useBirthday": "use_birthday",
    "counts": "monthly_counts",
}


@dataclass(frozen=True)
class CohortRule:
    """One scheduling pass over a birth-year / gender slice of the roster."""

    start_year: int
    end_year: int
    gender: str = "all"
    visit_count: int = 1
    use_birthday: bool = False
    monthly_counts: Tuple[int, ...] = (0,) * MONTHS_PER_YEAR

    @property
    def auto_distribute(self) -> bool:
        """Explicit monthly counts are ignored in birthday or multi-visit mode."""
        return self.use_birthday or self.visit_count > 1

    @property
    def planned_total(self) -> int:
        return sum(self.monthly_counts)

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.end_year} ({self.gender})"


@dataclass(frozen=True)
class RunConfig:
    target_year: int
    holidays: FrozenSet[date] = frozenset()
    saturday_working: bool = False
    cohorts: Tuple[CohortRule, ...] = field(default_factory=tuple)

    @property
    def max_visits(self) -> int:
        return max((rule.visit_count for rule in self.cohorts), default=1)


def _normalize_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in raw.items()}


def _parse_holiday(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"Invalid holiday date: {value!r}") from e


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigError(f"{name} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _parse_bool(value: Any, name: str, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "false"):
        return text == "true"
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def _parse_monthly_counts(values: Iterable[Any] | None) -> Tuple[int, ...]:
    counts: List[int] = []
    for i, value in enumerate(values or []):
        # Empty cells from the form mean "nobody this month"
        if value is None or value == "":
            counts.append(0)
            continue
        count = _parse_int(value, f"monthly_counts[{i}]")
        if count < 0:
            raise ConfigError(f"monthly_counts[{i}] must be non-negative, got {count}")
        counts.append(count)
    if len(counts) > MONTHS_PER_YEAR:
        raise ConfigError(f"monthly_counts has {len(counts)} entries, expected at most 12")
    counts.extend([0] * (MONTHS_PER_YEAR - len(counts)))
    return tuple(counts)


def parse_cohort_rule(raw: Dict[str, Any]) -> CohortRule:
    """Build a CohortRule from a mapping, validating every field."""
    data = _normalize_keys(raw)
    try:
        start_year = _parse_int(data["start_year"], "start_year")
        end_year = _parse_int(data["end_year"], "end_year")
    except KeyError as e:
        raise ConfigError(f"Cohort is missing required key {e.args[0]!r}") from e
    if start_year > end_year:
        raise ConfigError(f"Cohort start_year {start_year} is after end_year {end_year}")

    gender = str(data.get("gender") or "all").strip().lower()
    if gender not in GENDERS:
        raise ConfigError(f"Cohort gender must be one of {GENDERS}, got {gender!r}")

    visit_count = data.get("visit_count")
    visit_count = 1 if visit_count is None else _parse_int(visit_count, "visit_count")
    if visit_count < 1:
        raise ConfigError(f"visit_count must be at least 1, got {visit_count}")

    return CohortRule(
        start_year=start_year,
        end_year=end_year,
        gender=gender,
        visit_count=visit_count,
        use_birthday=_parse_bool(data.get("use_birthday"), "use_birthday"),
        monthly_counts=_parse_monthly_counts(data.get("monthly_counts")),
    )


def parse_config(raw: Dict[str, Any]) -> RunConfig:
    """Build a RunConfig from an already-decoded mapping."""
    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping")
    data = _normalize_keys(raw)
    if "target_year" not in data:
        raise ConfigError("Configuration is missing 'target_year'")
    target_year = _parse_int(data["target_year"], "target_year")
    if not 1000 <= target_year <= 9999:
        raise ConfigError(f"target_year must be a 4-digit year, got {target_year}")

    cohorts_raw = data.get("cohorts") or []
    if not isinstance(cohorts_raw, list):
        raise ConfigError("'cohorts' must be a list")

    return RunConfig(
        target_year=target_year,
        holidays=frozenset(_parse_holiday(h) for h in data.get("holidays") or []),
        saturday_working=_parse_bool(data.get("saturday_working"), "saturday_working"),
        cohorts=tuple(parse_cohort_rule(c) for c in cohorts_raw),
    )


def load_config(path: str | Path) -> RunConfig:
    """
    Load a run configuration file.

    Args:
        path: YAML file, or JSON when the suffix is ``.json``

    Returns:
        Validated RunConfig

    Raises:
        ConfigError: If the file cannot be decoded or fails validation
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse config {path}: {e}") from e
    return parse_config(raw or {})
