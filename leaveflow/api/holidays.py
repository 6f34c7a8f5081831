# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from leaveflow.api.deps import ActorDep
from leaveflow.db import SessionDep
from leaveflow.schemas.holiday import HolidayListResponse
from leaveflow.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.get("", response_model=HolidayListResponse)
async def list_holidays(
    session: SessionDep,
    actor: ActorDep,
    fiscal_year: int | None = Query(default=None, ge=2000, le=2100),
    location: str | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=366),
) -> HolidayListResponse:
    """List holidays, optionally for a fiscal year, location or date range."""
    return await holiday_service.list_holidays(session, fiscal_year, location, start_date, end_date, offset, limit)
