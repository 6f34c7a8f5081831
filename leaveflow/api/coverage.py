# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query

from leaveflow.api.deps import ActorDep
from leaveflow.db import SessionDep
from leaveflow.models.enums import LeaveType
from leaveflow.outcome import unwrap
from leaveflow.schemas.coverage import AvailabilityResponse, ConflictReport, CoverageResponse
from leaveflow.services import coverage as coverage_service

coverage_router = APIRouter(prefix="/coverage", tags=["coverage"])


@coverage_router.get("", response_model=CoverageResponse)
async def analyze_coverage(
    session: SessionDep,
    actor: ActorDep,
    start_date: date = Query(),
    end_date: date = Query(),
    department: str | None = Query(default=None),
) -> CoverageResponse:
    """Per-day team coverage over a date range."""
    return unwrap(await coverage_service.analyze_coverage(session, actor, start_date, end_date, department))


@coverage_router.get("/conflicts", response_model=ConflictReport)
async def detect_conflicts(
    session: SessionDep,
    actor: ActorDep,
    start_date: date = Query(),
    end_date: date = Query(),
    department: str | None = Query(default=None),
    min_team_size: int = Query(default=2, ge=1),
    leave_type: LeaveType | None = Query(default=None),
) -> ConflictReport:
    """Understaffing and priority-overlap conflicts over a date range."""
    return unwrap(
        await coverage_service.detect_conflicts(
            session, actor, start_date, end_date, department, min_team_size, leave_type
        )
    )


@coverage_router.get("/availability", response_model=AvailabilityResponse)
async def get_employee_availability(
    session: SessionDep,
    actor: ActorDep,
    employee_ids: Annotated[list[uuid.UUID], Query(alias="employee_id", min_length=1)],
    start_date: date = Query(),
    end_date: date = Query(),
) -> AvailabilityResponse:
    """Day-by-day availability of specific employees."""
    return unwrap(
        await coverage_service.get_employee_availability(session, actor, employee_ids, start_date, end_date)
    )
