"""Working-day calendar: Sundays off, Saturdays optional, configured holidays off."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import AbstractSet, Iterator

SATURDAY = 5
SUNDAY = 6

# How far next_working_day looks ahead before giving up.
SNAP_WINDOW_DAYS = 60


def is_working_day(day: date, holidays: AbstractSet[date], saturday_working: bool) -> bool:
    """
    Check whether a single date is a working day.

    Args:
        day: Date to check
        holidays: Dates that are never working days
        saturday_working: Whether Saturdays count as working days

    Returns:
        True if the date is a working day
    """
    weekday = day.weekday()
    if weekday == SUNDAY:
        return False
    if weekday == SATURDAY and not saturday_working:
        return False
    return day not in holidays


def working_days_of_month(
    year: int,
    month: int,
    holidays: AbstractSet[date],
    saturday_working: bool,
) -> Iterator[date]:
    """
    Yield the working days of a month in calendar order.

    Args:
        year: Calendar year
        month: Month number, 1-12
        holidays: Dates that are never working days
        saturday_working: Whether Saturdays count as working days

    Yields:
        Working dates from the 1st to the last day of the month. Yields
        nothing when the month has no working day.
    """
    last_day = calendar.monthrange(year, month)[1]
    for day_of_month in range(1, last_day + 1):
        day = date(year, month, day_of_month)
        if is_working_day(day, holidays, saturday_working):
            yield day


def next_working_day(day: date, holidays: AbstractSet[date], saturday_working: bool) -> date:
    """
    Find the first working day on or after ``day``.

    Scans at most SNAP_WINDOW_DAYS days. When nothing in the window is a
    working day the original date is returned unchanged; callers re-check
    the result with is_working_day to detect this.
    """
    current = day
    for _ in range(SNAP_WINDOW_DAYS):
        if is_working_day(current, holidays, saturday_working):
            return current
        current += timedelta(days=1)
    return day
