from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from leaveflow.services.holiday import fetch_holiday_dates

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator

    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.models.policy import LeavePolicy

HALF_DAY = Decimal("0.5")

_ONE_DAY = timedelta(days=1)
# Saturday and Sunday.
_WEEKEND = frozenset({5, 6})


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += _ONE_DAY


def is_weekend(day: date) -> bool:
    return day.weekday() in _WEEKEND


def count_business_days(
    start: date,
    end: date,
    holidays: Collection[date] = frozenset(),
    *,
    exclude_weekends: bool = True,
) -> int:
    """Count days in ``[start, end]`` that are neither weekends nor holidays."""
    total = 0
    for day in iter_dates(start, end):
        if exclude_weekends and is_weekend(day):
            continue
        if day in holidays:
            continue
        total += 1
    return total


def add_business_days(start: date, days: int, holidays: Collection[date] = frozenset()) -> date:
    """Return the date ``days`` business days after ``start``."""
    current = start
    remaining = days
    while remaining > 0:
        current += _ONE_DAY
        if is_weekend(current) or current in holidays:
            continue
        remaining -= 1
    return current


async def calculate_leave_days(
    session: AsyncSession,
    policy: LeavePolicy,
    location: str | None,
    start_date: date,
    end_date: date,
    *,
    is_half_day: bool = False,
) -> Decimal:
    """Calculate the number of leave days charged for a date range.

    Weekends and holidays are skipped according to the policy flags; holidays
    match the employee's location or apply to every location. A half-day
    request charges 0.5 when its single day is a working day. A result of
    zero means the range covers no working time.
    """
    holidays: set[date] = set()
    if policy.exclude_holidays:
        holidays = await fetch_holiday_dates(session, start_date, end_date, location)

    working_days = count_business_days(start_date, end_date, holidays, exclude_weekends=policy.exclude_weekends)
    if is_half_day:
        return HALF_DAY if working_days else Decimal("0")
    return Decimal(working_days)
