"""Visit date projection: fixed-interval cycles and birthday-anchored timelines."""

from __future__ import annotations

import calendar
from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta

from visitplan.config import MONTHS_PER_YEAR, RunConfig

from .workdays import next_working_day


def month_offset(visit_index: int, visit_count: int) -> int:
    """
    Whole months between the first visit and visit number ``visit_index``.

    Equivalent to ``int(12 / visit_count * visit_index)``: the interval may be
    fractional (e.g. 2.4 months for 5 visits) and each step is truncated, so
    spacing is uneven when ``visit_count`` does not divide 12.
    """
    return MONTHS_PER_YEAR * visit_index // visit_count


def _snap_all(dates: List[date], cfg: RunConfig) -> List[date]:
    return [next_working_day(d, cfg.holidays, cfg.saturday_working) for d in dates]


def project_cycle(first_visit: date, visit_count: int, cfg: RunConfig) -> List[date]:
    """
    Project a year of follow-up visits from a first visit date.

    Each follow-up is ``first_visit`` plus its month offset. Dates pushed
    past ``cfg.target_year`` are folded back by one year since the cycle
    recurs yearly. The dates are sorted and then snapped to working days.

    Args:
        first_visit: Working day chosen for the first visit
        visit_count: Visits per year (>= 1)
        cfg: Run configuration (target year and calendar)

    Returns:
        ``visit_count`` dates in ascending order
    """
    dates = [first_visit]
    for v in range(1, visit_count):
        candidate = first_visit + relativedelta(months=month_offset(v, visit_count))
        if candidate.year > cfg.target_year:
            candidate -= relativedelta(years=1)
        dates.append(candidate)
    dates.sort()
    return _snap_all(dates, cfg)


def clamp_to_month(year: int, month: int, day_of_month: int) -> date:
    """Build a date, using the month's last day when ``day_of_month`` is past it."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day_of_month, last_day))


def project_birthday(birth_day_of_month: int, visit_count: int, cfg: RunConfig) -> List[date]:
    """
    Project visits anchored to a person's birth day-of-month.

    Visit ``v`` falls in month ``v * 12 // visit_count`` of the target year
    (January first), on the birth day clamped to that month's length, then
    snapped forward to a working day.

    Args:
        birth_day_of_month: 1-31
        visit_count: Visits per year (>= 1)
        cfg: Run configuration (target year and calendar)

    Returns:
        ``visit_count`` dates in ascending order
    """
    dates = [
        clamp_to_month(cfg.target_year, month_offset(v, visit_count) + 1, birth_day_of_month)
        for v in range(visit_count)
    ]
    return sorted(_snap_all(dates, cfg))
