# ruff: noqa: TC003
from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from leaveflow.config import get_settings
from leaveflow.exceptions import Forbidden, NotFound, ValidationError
from leaveflow.models.employee import Employee
from leaveflow.models.enums import (
    ActorRole,
    ConflictSeverity,
    ConflictType,
    LeaveStatus,
    LeaveType,
    RiskLevel,
)
from leaveflow.models.request import LeaveRequest
from leaveflow.schemas.coverage import (
    AffectedEmployee,
    AvailabilityResponse,
    AvailabilitySummary,
    ConflictReport,
    ConflictSummary,
    CoverageResponse,
    CoverageSummary,
    DayAvailability,
    DayCoverage,
    EmployeeAvailability,
    LeaveConflict,
)
from leaveflow.services.duration import is_weekend, iter_dates
from leaveflow.services.employee import can_view_employee, get_employee_directory
from leaveflow.services.holiday import fetch_holiday_dates
from leaveflow.services.transaction import run_query

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.outcome import Failure, Success
    from leaveflow.schemas.auth import Actor

_ABSENT_STATUSES = [LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value]

_UNDERSTAFFED_NONE_LEFT = "Consider rejecting some leave requests or finding temporary coverage"
_UNDERSTAFFED_SOME_LEFT = "Consider staggering leave dates or arranging additional coverage"
_UNDERSTAFFED_FOLLOWUPS = [
    "Review workload distribution for this period",
    "Consider emergency protocols if critical operations are affected",
]
_PRIORITY_OVERLAP_RECOMMENDATIONS = [
    "Consider staggering senior employee leaves",
    "Arrange for temporary leadership coverage",
    "Review critical operations for this period",
]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _validate_range(start_date: date, end_date: date) -> None:
    max_days = get_settings().max_coverage_range_days
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date")
    if (end_date - start_date).days + 1 > max_days:
        raise ValidationError(f"Date range may not exceed {max_days} days")


def _resolve_department(actor: Actor, department: str | None) -> str | None:
    """Managers analyse their own department; admins any department or all."""
    if actor.role == ActorRole.EMPLOYEE:
        raise Forbidden("Team coverage is available to managers and HR only")
    if actor.role == ActorRole.MANAGER:
        if department is None:
            department = actor.department
        if department is None or department != actor.department:
            raise Forbidden("Managers may only analyse their own department")
    return department


def _risk_level(coverage_percentage: float) -> RiskLevel:
    settings = get_settings()
    if coverage_percentage < settings.coverage_high_risk_below:
        return RiskLevel.HIGH
    if coverage_percentage < settings.coverage_medium_risk_below:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


async def _absences(
    session: AsyncSession,
    start_date: date,
    end_date: date,
    employee_ids: Collection[uuid.UUID],
    leave_type: LeaveType | None = None,
) -> list[LeaveRequest]:
    """Pending and approved requests of the given employees overlapping the range."""
    if not employee_ids:
        return []
    query = select(LeaveRequest).where(
        col(LeaveRequest.employee_id).in_(list(employee_ids)),
        col(LeaveRequest.status).in_(_ABSENT_STATUSES),
        col(LeaveRequest.start_date) <= end_date,
        col(LeaveRequest.end_date) >= start_date,
    )
    if leave_type is not None:
        query = query.where(col(LeaveRequest.leave_type) == leave_type.value)
    result = await session.execute(query.order_by(col(LeaveRequest.start_date), col(LeaveRequest.id)))
    return list(result.scalars().all())


def _absences_by_day(requests: list[LeaveRequest], start_date: date, end_date: date) -> dict[date, list[LeaveRequest]]:
    by_day: dict[date, list[LeaveRequest]] = defaultdict(list)
    for request in requests:
        for day in iter_dates(max(request.start_date, start_date), min(request.end_date, end_date)):
            by_day[day].append(request)
    return by_day


def _affected(requests: list[LeaveRequest], team: dict[uuid.UUID, Employee]) -> list[AffectedEmployee]:
    return [
        AffectedEmployee(
            employee_id=request.employee_id,
            employee_name=team[request.employee_id].full_name,
            request_id=request.id,
            leave_type=LeaveType(request.leave_type),
            status=LeaveStatus(request.status),
        )
        for request in requests
    ]


def _is_priority_absence(request: LeaveRequest, employee: Employee) -> bool:
    return (
        employee.role == ActorRole.MANAGER
        or request.is_emergency
        or request.leave_type == LeaveType.EMERGENCY
    )


def _understaffing_severity(available: int, min_team_size: int) -> ConflictSeverity:
    if available == 0:
        return ConflictSeverity.CRITICAL
    if available < min_team_size / 2:
        return ConflictSeverity.HIGH
    return ConflictSeverity.MEDIUM


# ---------------------------------------------------------------------------
# Analyses
# ---------------------------------------------------------------------------


async def _analyze_coverage(
    session: AsyncSession,
    actor: Actor,
    start_date: date,
    end_date: date,
    department: str | None = None,
) -> CoverageResponse:
    """Per-day staffing of a department (or the whole company) over a range.

    Pending requests count as absences alongside approved ones, so coverage
    reflects what would happen if everything outstanding were approved.
    """
    _validate_range(start_date, end_date)
    department = _resolve_department(actor, department)

    team = {e.id: e for e in await get_employee_directory(session).list_active(department)}
    by_day = _absences_by_day(await _absences(session, start_date, end_date, team.keys()), start_date, end_date)
    holidays = await fetch_holiday_dates(session, start_date, end_date)
    total = len(team)

    days: list[DayCoverage] = []
    for day in iter_dates(start_date, end_date):
        on_leave = len({r.employee_id for r in by_day.get(day, [])})
        available = total - on_leave
        percentage = round(available / total * 100, 2) if total else 100.0
        days.append(
            DayCoverage(
                date=day,
                total=total,
                on_leave=on_leave,
                available=available,
                coverage_percentage=percentage,
                risk_level=_risk_level(percentage),
                is_working_day=not is_weekend(day) and day not in holidays,
            )
        )

    return CoverageResponse(
        start_date=start_date,
        end_date=end_date,
        department=department,
        team_size=total,
        days=days,
        summary=CoverageSummary(
            average_coverage=round(sum(d.coverage_percentage for d in days) / len(days), 2),
            high_risk_days=sum(1 for d in days if d.risk_level == RiskLevel.HIGH),
            medium_risk_days=sum(1 for d in days if d.risk_level == RiskLevel.MEDIUM),
            total_days=len(days),
        ),
    )


async def _detect_conflicts(
    session: AsyncSession,
    actor: Actor,
    start_date: date,
    end_date: date,
    department: str | None = None,
    min_team_size: int = 2,
    leave_type: LeaveType | None = None,
) -> ConflictReport:
    """Find understaffed days and days where several senior or emergency absences coincide."""
    _validate_range(start_date, end_date)
    if min_team_size < 1:
        raise ValidationError("min_team_size must be at least 1")
    department = _resolve_department(actor, department)

    team = {e.id: e for e in await get_employee_directory(session).list_active(department)}
    requests = await _absences(session, start_date, end_date, team.keys(), leave_type)
    by_day = _absences_by_day(requests, start_date, end_date)
    total = len(team)

    conflicts: list[LeaveConflict] = []
    for day in iter_dates(start_date, end_date):
        day_requests = by_day.get(day, [])
        if not day_requests:
            continue

        available = total - len({r.employee_id for r in day_requests})
        if available < min_team_size:
            first = _UNDERSTAFFED_NONE_LEFT if available == 0 else _UNDERSTAFFED_SOME_LEFT
            conflicts.append(
                LeaveConflict(
                    date=day,
                    conflict_type=ConflictType.UNDERSTAFFING,
                    severity=_understaffing_severity(available, min_team_size),
                    description=(
                        f"Only {available} out of {total} team members available "
                        f"(minimum required: {min_team_size})"
                    ),
                    available=available,
                    affected_employees=_affected(day_requests, team),
                    recommendations=[first, *_UNDERSTAFFED_FOLLOWUPS],
                )
            )

        priority = [r for r in day_requests if _is_priority_absence(r, team[r.employee_id])]
        if len(day_requests) > 1 and len(priority) > 1:
            conflicts.append(
                LeaveConflict(
                    date=day,
                    conflict_type=ConflictType.PRIORITY_OVERLAP,
                    severity=ConflictSeverity.HIGH,
                    description=f"{len(priority)} senior or emergency absences on the same day",
                    available=available,
                    affected_employees=_affected(priority, team),
                    recommendations=list(_PRIORITY_OVERLAP_RECOMMENDATIONS),
                )
            )

    return ConflictReport(
        start_date=start_date,
        end_date=end_date,
        department=department,
        min_team_size=min_team_size,
        team_size=total,
        conflicts=conflicts,
        summary=ConflictSummary(
            total=len(conflicts),
            critical=sum(1 for c in conflicts if c.severity == ConflictSeverity.CRITICAL),
            high=sum(1 for c in conflicts if c.severity == ConflictSeverity.HIGH),
            medium=sum(1 for c in conflicts if c.severity == ConflictSeverity.MEDIUM),
        ),
    )


async def _get_employee_availability(
    session: AsyncSession,
    actor: Actor,
    employee_ids: list[uuid.UUID],
    start_date: date,
    end_date: date,
) -> AvailabilityResponse:
    """Day-by-day availability of specific employees.

    A half-day absence still marks the day unavailable and is flagged as such.
    """
    _validate_range(start_date, end_date)
    if not employee_ids:
        raise ValidationError("At least one employee id is required")

    employees = await get_employee_directory(session).get_employees(employee_ids)
    missing = [str(i) for i in employee_ids if i not in employees]
    if missing:
        raise NotFound(f"Employees not found: {', '.join(missing)}")
    for employee in employees.values():
        if not can_view_employee(actor, employee):
            raise Forbidden("Not allowed to view availability of these employees")

    requests = await _absences(session, start_date, end_date, employees.keys())
    by_employee: dict[uuid.UUID, list[LeaveRequest]] = defaultdict(list)
    for request in requests:
        by_employee[request.employee_id].append(request)

    results: list[EmployeeAvailability] = []
    for employee_id in dict.fromkeys(employee_ids):
        employee = employees[employee_id]
        days: list[DayAvailability] = []
        for day in iter_dates(start_date, end_date):
            leave = next(
                (r for r in by_employee[employee_id] if r.start_date <= day <= r.end_date),
                None,
            )
            days.append(
                DayAvailability(
                    date=day,
                    is_available=leave is None,
                    request_id=leave.id if leave else None,
                    leave_status=LeaveStatus(leave.status) if leave else None,
                    leave_type=LeaveType(leave.leave_type) if leave else None,
                    is_half_day=leave.is_half_day if leave else False,
                )
            )
        available_days = sum(1 for d in days if d.is_available)
        results.append(
            EmployeeAvailability(
                employee_id=employee_id,
                employee_name=employee.full_name,
                total_days=len(days),
                available_days=available_days,
                unavailable_days=len(days) - available_days,
                availability_percentage=round(available_days / len(days) * 100, 2),
                days=days,
            )
        )

    return AvailabilityResponse(
        start_date=start_date,
        end_date=end_date,
        employees=results,
        summary=AvailabilitySummary(
            total_employees=len(results),
            average_availability=round(sum(e.availability_percentage for e in results) / len(results), 2),
            fully_available=sum(1 for e in results if e.availability_percentage == 100),
            partially_available=sum(1 for e in results if 0 < e.availability_percentage < 100),
            unavailable=sum(1 for e in results if e.availability_percentage == 0),
        ),
    )


async def assess_team_impact(
    session: AsyncSession,
    employee: Employee,
    start_date: date,
    end_date: date,
) -> RiskLevel:
    """Risk of the employee's absence given department colleagues already off.

    Counts colleagues with pending or approved leave overlapping the range:
    three or more is HIGH, one or more is MEDIUM.
    """
    result = await session.execute(
        select(func.count(func.distinct(col(LeaveRequest.employee_id))))
        .select_from(LeaveRequest)
        .join(Employee, col(Employee.id) == col(LeaveRequest.employee_id))
        .where(
            col(Employee.department) == employee.department,
            col(LeaveRequest.employee_id) != employee.id,
            col(LeaveRequest.status).in_(_ABSENT_STATUSES),
            col(LeaveRequest.start_date) <= end_date,
            col(LeaveRequest.end_date) >= start_date,
        )
    )
    colleagues_off = result.scalar_one()
    if colleagues_off >= 3:
        return RiskLevel.HIGH
    if colleagues_off >= 1:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def analyze_coverage(
    session: AsyncSession,
    actor: Actor,
    start_date: date,
    end_date: date,
    department: str | None = None,
) -> Success[CoverageResponse] | Failure:
    return await run_query(session, _analyze_coverage, actor, start_date, end_date, department)


async def detect_conflicts(
    session: AsyncSession,
    actor: Actor,
    start_date: date,
    end_date: date,
    department: str | None = None,
    min_team_size: int = 2,
    leave_type: LeaveType | None = None,
) -> Success[ConflictReport] | Failure:
    return await run_query(
        session, _detect_conflicts, actor, start_date, end_date, department, min_team_size, leave_type
    )


async def get_employee_availability(
    session: AsyncSession,
    actor: Actor,
    employee_ids: list[uuid.UUID],
    start_date: date,
    end_date: date,
) -> Success[AvailabilityResponse] | Failure:
    return await run_query(session, _get_employee_availability, actor, employee_ids, start_date, end_date)
