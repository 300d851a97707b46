"""Tests for working-day counting (weekend and holiday aware)."""

from __future__ import annotations

from datetime import date

from approval_engine.services.duration import count_working_days, is_working_day

# 2025-01-06 is a Monday.
MONDAY = date(2025, 1, 6)
FRIDAY = date(2025, 1, 10)
SATURDAY = date(2025, 1, 11)
SUNDAY = date(2025, 1, 12)
NEXT_MONDAY = date(2025, 1, 13)


def test_single_weekday_counts_once() -> None:
    assert count_working_days(MONDAY, MONDAY) == 1


def test_full_work_week() -> None:
    assert count_working_days(MONDAY, FRIDAY) == 5


def test_weekend_days_excluded() -> None:
    assert count_working_days(FRIDAY, NEXT_MONDAY) == 2


def test_weekend_only_is_zero() -> None:
    assert count_working_days(SATURDAY, SUNDAY) == 0


def test_holidays_excluded() -> None:
    assert count_working_days(MONDAY, FRIDAY, holidays={date(2025, 1, 8)}) == 4


def test_holiday_on_weekend_not_double_counted() -> None:
    assert count_working_days(MONDAY, NEXT_MONDAY, holidays={SATURDAY}) == 6


def test_reversed_range_is_zero() -> None:
    assert count_working_days(FRIDAY, MONDAY) == 0


def test_is_working_day() -> None:
    assert is_working_day(MONDAY) is True
    assert is_working_day(SUNDAY) is False
    assert is_working_day(MONDAY, holidays=[MONDAY]) is False
