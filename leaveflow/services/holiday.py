from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ColumnElement, func, or_, select
from sqlmodel import col

from leaveflow.models.holiday import Holiday
from leaveflow.schemas.holiday import HolidayListResponse, HolidayResponse

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession


def _build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        date=holiday.date,
        name=holiday.name,
        location=holiday.location,
        fiscal_year=holiday.fiscal_year,
    )


def _location_filter(location: str | None) -> ColumnElement[bool]:
    """Holidays without a location apply everywhere."""
    if location is None:
        return col(Holiday.location).is_(None)
    return or_(col(Holiday.location).is_(None), col(Holiday.location) == location)


async def fetch_holiday_dates(
    session: AsyncSession,
    start_date: date,
    end_date: date,
    location: str | None = None,
) -> set[date]:
    """Fetch holiday dates in the given range that apply to ``location``."""
    result = await session.execute(
        select(col(Holiday.date)).where(
            col(Holiday.date) >= start_date,
            col(Holiday.date) <= end_date,
            _location_filter(location),
        )
    )
    return {row[0] for row in result.all()}


async def list_holidays(
    session: AsyncSession,
    fiscal_year: int | None = None,
    location: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 100,
) -> HolidayListResponse:
    """List holidays with optional fiscal year, location and date range filters."""
    base_filter = []
    if fiscal_year is not None:
        base_filter.append(col(Holiday.fiscal_year) == fiscal_year)
    if location is not None:
        base_filter.append(_location_filter(location))
    if start_date is not None:
        base_filter.append(col(Holiday.date) >= start_date)
    if end_date is not None:
        base_filter.append(col(Holiday.date) <= end_date)

    count_result = await session.execute(select(func.count()).select_from(Holiday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Holiday).where(*base_filter).order_by(col(Holiday.date), col(Holiday.id)).offset(offset).limit(limit)
    )
    holidays = list(result.scalars().all())

    return HolidayListResponse(
        items=[_build_holiday_response(h) for h in holidays],
        total=total,
    )
