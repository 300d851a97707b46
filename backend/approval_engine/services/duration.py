from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import date


def is_working_day(day: date, holidays: Collection[date] = ()) -> bool:
    """Weekdays that are not holidays."""
    return day.weekday() < 5 and day not in holidays


def count_working_days(start_date: date, end_date: date, holidays: Collection[date] = ()) -> int:
    """Count working days between two dates, both ends inclusive.

    Returns 0 when ``end_date`` is before ``start_date``.
    """
    total = 0
    current_date = start_date
    one_day = timedelta(days=1)

    while current_date <= end_date:
        if is_working_day(current_date, holidays):
            total += 1
        current_date += one_day

    return total
