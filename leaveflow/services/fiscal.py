from __future__ import annotations

from datetime import date, timedelta

from leaveflow.config import get_settings


def fiscal_year_for(day: date, start_month: int | None = None) -> int:
    """Return the fiscal year label (its starting calendar year) containing ``day``."""
    month = start_month if start_month is not None else get_settings().fiscal_year_start_month
    return day.year if day.month >= month else day.year - 1


def fiscal_year_bounds(fiscal_year: int, start_month: int | None = None) -> tuple[date, date]:
    """Return the first and last day of a fiscal year."""
    month = start_month if start_month is not None else get_settings().fiscal_year_start_month
    first = date(fiscal_year, month, 1)
    last = date(fiscal_year + 1, month, 1) - timedelta(days=1)
    return first, last


def current_fiscal_year() -> int:
    return fiscal_year_for(date.today())
