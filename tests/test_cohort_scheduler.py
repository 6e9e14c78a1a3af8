"""Tests for the cohort schedulers (manual, auto-distribution and birthday modes)."""

from datetime import date, timedelta

import pytest

from visitplan.config import CohortRule, RunConfig
from visitplan.engine.birthday import BirthdayScheduler
from visitplan.engine.distribution import DistributionScheduler
from visitplan.errors import CapacityExceededError
from visitplan.services.eligibility import eligible_pool
from visitplan.services.workdays import is_working_day


def _counts(*leading):
    return tuple(leading) + (0,) * (12 - len(leading))


def test_manual_plan_one_person_per_working_day(make_people, january_2026_holidays):
    """Five people, five January working days: one person per day, nobody unplanned."""
    people = make_people([date(2000, 6, 1)] * 5)
    rule = CohortRule(start_year=2000, end_year=2000, visit_count=1, monthly_counts=_counts(5))
    cfg = RunConfig(target_year=2026, holidays=january_2026_holidays, cohorts=(rule,))

    result = DistributionScheduler().make_schedule(people, rule, cfg)

    assert [a.dates for a in result.assigned] == [(date(2026, 1, d),) for d in range(5, 10)]
    assert [a.person for a in result.assigned] == people
    assert all(a.month == 1 for a in result.assigned)
    assert result.unplanned == []
    assert result.warnings == []
    assert list(result.by_month()) == [1]


def test_capacity_exceeded_names_totals(make_people):
    """A manual plan of 12 against 10 eligible people fails."""
    people = make_people([date(2000, 1, 1)] * 10)
    rule = CohortRule(start_year=2000, end_year=2000, monthly_counts=_counts(6, 6))
    cfg = RunConfig(target_year=2026, cohorts=(rule,))

    with pytest.raises(CapacityExceededError, match=r"planned total \(12\).*\(10\)") as exc:
        DistributionScheduler().make_schedule(people, rule, cfg)

    assert exc.value.planned == 12
    assert exc.value.available == 10
    assert exc.value.cohort == "2000-2000 (all)"


def test_shortfall_leaves_remainder_unplanned(make_people):
    """A plan smaller than the pool warns and leaves the tail of the roster unplanned."""
    people = make_people([date(2000, 1, 1)] * 10)
    rule = CohortRule(start_year=2000, end_year=2000, monthly_counts=_counts(3, 3))
    cfg = RunConfig(target_year=2026, cohorts=(rule,))

    result = DistributionScheduler().make_schedule(people, rule, cfg)

    assert len(result.assigned) == 6
    assert result.unplanned == people[6:]
    assert [a.first_visit for a in result.assigned] == [
        date(2026, 1, 1), date(2026, 1, 2), date(2026, 1, 5),
        date(2026, 2, 2), date(2026, 2, 3), date(2026, 2, 4),
    ]
    assert len(result.warnings) == 1
    assert "plan (6) is less than population (10)" in result.warnings[0]


def test_auto_distribution_quarterly(make_people):
    """13 people with 4 visits: January takes 2, every other month 1, dates 3 months apart."""
    people = make_people([date(1965, 2, 10)] * 13, female=True)
    # Manual counts are ignored in auto mode
    rule = CohortRule(start_year=1960, end_year=1970, gender="female", visit_count=4,
                      monthly_counts=_counts(99))
    cfg = RunConfig(target_year=2026, cohorts=(rule,))

    result = DistributionScheduler().make_schedule(people, rule, cfg)

    sizes = {month: len(items) for month, items in result.by_month().items()}
    assert sizes == {1: 2, **{m: 1 for m in range(2, 13)}}
    assert result.unplanned == []
    assert result.warnings == []

    first, second, third = result.assigned[:3]
    assert first.dates == (date(2026, 1, 1), date(2026, 4, 1), date(2026, 7, 1), date(2026, 10, 1))
    assert second.dates == (date(2026, 1, 2), date(2026, 4, 2), date(2026, 7, 2), date(2026, 10, 2))
    assert third.dates == (date(2026, 2, 2), date(2026, 5, 4), date(2026, 8, 3), date(2026, 11, 2))

    # December's person wraps back into the target year
    last = result.assigned[-1]
    assert last.month == 12
    assert last.dates == (date(2026, 3, 2), date(2026, 6, 1), date(2026, 9, 1), date(2026, 12, 1))


def test_birthday_mode_assigns_everyone(make_people):
    """Birthday mode ignores counts, plans everyone and buckets by earliest visit."""
    people = make_people([date(1950, 5, 31), date(1945, 1, 15)])
    rule = CohortRule(start_year=1940, end_year=1959, visit_count=12, use_birthday=True)
    cfg = RunConfig(target_year=2026, holidays=frozenset({date(2026, 4, 30)}), cohorts=(rule,))

    result = BirthdayScheduler().make_schedule(people, rule, cfg)

    assert result.unplanned == []
    assert result.warnings == []
    born_31st, born_15th = result.assigned
    assert len(born_31st.dates) == 12
    assert born_31st.dates[0] == date(2026, 2, 2)
    assert born_31st.dates[3] == date(2026, 5, 1)  # 30 Apr clamped, then past the holiday
    assert born_31st.month == 2
    assert born_15th.dates[0] == date(2026, 1, 15)
    assert born_15th.month == 1


def test_empty_population_warns(make_people):
    """No eligible people: empty result with a warning, not an error."""
    people = make_people([date(1980, 1, 1)] * 3)
    rule = CohortRule(start_year=2000, end_year=2005, monthly_counts=_counts(10))
    cfg = RunConfig(target_year=2026, cohorts=(rule,))

    result = DistributionScheduler().make_schedule(people, rule, cfg)

    assert result.assigned == [] and result.unplanned == []
    assert result.warnings == ["2000-2005 (all): no eligible population found."]


def test_filter_by_gender_and_valid_birth_date(make_people):
    """Invalid birth dates and the other gender never enter the pool."""
    women = make_people([date(2001, 1, 1)] * 3, female=True)
    men = make_people([date(2001, 1, 1)] * 2, start_row=4)
    undated = make_people([None] * 2, female=True, start_row=6)
    people = women + men + undated

    female_rule = CohortRule(start_year=2000, end_year=2002, gender="female")
    male_rule = CohortRule(start_year=2000, end_year=2002, gender="male")
    all_rule = CohortRule(start_year=2000, end_year=2002)

    assert eligible_pool(people, female_rule) == women
    assert eligible_pool(people, male_rule) == men
    assert eligible_pool(people, all_rule) == women + men


def test_month_without_working_days_is_skipped(make_people):
    """February made of holidays: its quota stays in the pool and ends up unplanned."""
    people = make_people([date(2000, 1, 1)] * 5)
    holidays = frozenset(date(2026, 2, d) for d in range(1, 29))
    rule = CohortRule(start_year=2000, end_year=2000, monthly_counts=_counts(2, 3))
    cfg = RunConfig(target_year=2026, holidays=holidays, cohorts=(rule,))

    result = DistributionScheduler().make_schedule(people, rule, cfg)

    assert len(result.assigned) == 2
    assert result.unplanned == people[2:]
    assert any("February 2026 has no working days" in w for w in result.warnings)


def test_unresolvable_snap_is_reported(make_people):
    """When no working day exists within the snap window the date is kept and flagged."""
    people = make_people([date(1950, 3, 15)])
    start = date(2026, 1, 15)
    holidays = frozenset(start + timedelta(days=i) for i in range(60))
    rule = CohortRule(start_year=1950, end_year=1950, visit_count=1, use_birthday=True)
    cfg = RunConfig(target_year=2026, holidays=holidays, cohorts=(rule,))

    result = BirthdayScheduler().make_schedule(people, rule, cfg)

    assert result.assigned[0].dates == (start,)
    assert len(result.warnings) == 1
    assert "2026-01-15" in result.warnings[0]
    assert "roster row 1" in result.warnings[0]


@pytest.mark.parametrize("rule,scheduler", [
    (CohortRule(start_year=1990, end_year=2010, monthly_counts=_counts(4, 0, 3, 0, 0, 5)), DistributionScheduler()),
    (CohortRule(start_year=1990, end_year=2010, visit_count=3), DistributionScheduler()),
    (CohortRule(start_year=1990, end_year=2010, visit_count=5), DistributionScheduler()),
    (CohortRule(start_year=1990, end_year=2010, visit_count=7, use_birthday=True), BirthdayScheduler()),
])
def test_partition_and_visit_invariants(make_people, rule, scheduler):
    """Assigned + unplanned == eligible pool; every visit list is complete, ascending, on working days."""
    births = [date(1990 + i % 25, 1 + i % 12, 1 + i % 28) for i in range(40)]
    people = make_people(births)
    cfg = RunConfig(target_year=2026, holidays=frozenset({date(2026, 3, 9), date(2026, 6, 1)}), cohorts=(rule,))

    result = scheduler.make_schedule(people, rule, cfg)
    pool = eligible_pool(people, rule)

    covered = [a.person for a in result.assigned] + result.unplanned
    assert len(covered) == len(pool)
    assert {p.row_number for p in covered} == {p.row_number for p in pool}
    for assignment in result.assigned:
        assert len(assignment.dates) == rule.visit_count
        assert all(a < b for a, b in zip(assignment.dates, assignment.dates[1:]))
        assert all(is_working_day(d, cfg.holidays, cfg.saturday_working) for d in assignment.dates)
