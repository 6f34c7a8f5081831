# ruff: noqa: TC001, TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel

from leaveflow.models.enums import ConflictSeverity, ConflictType, LeaveStatus, LeaveType, RiskLevel


class DayCoverage(BaseModel):
    """Staffing on a single calendar day."""

    date: datetime.date
    total: int
    on_leave: int
    available: int
    coverage_percentage: float
    risk_level: RiskLevel
    is_working_day: bool


class CoverageSummary(BaseModel):
    """Roll-up of a coverage analysis."""

    average_coverage: float
    high_risk_days: int
    medium_risk_days: int
    total_days: int


class CoverageResponse(BaseModel):
    """Per-day coverage for a department over a date range."""

    start_date: datetime.date
    end_date: datetime.date
    department: str | None
    team_size: int
    days: list[DayCoverage]
    summary: CoverageSummary


class AffectedEmployee(BaseModel):
    """An absent employee contributing to a conflict."""

    employee_id: uuid.UUID
    employee_name: str
    request_id: uuid.UUID
    leave_type: LeaveType
    status: LeaveStatus


class LeaveConflict(BaseModel):
    """A day on which absences put the team at risk."""

    date: datetime.date
    conflict_type: ConflictType
    severity: ConflictSeverity
    description: str
    available: int
    affected_employees: list[AffectedEmployee]
    recommendations: list[str]


class ConflictSummary(BaseModel):
    """Counts of detected conflicts by severity."""

    total: int
    critical: int
    high: int
    medium: int


class ConflictReport(BaseModel):
    """Conflicts detected over a date range."""

    start_date: datetime.date
    end_date: datetime.date
    department: str | None
    min_team_size: int
    team_size: int
    conflicts: list[LeaveConflict]
    summary: ConflictSummary


class DayAvailability(BaseModel):
    """Whether an employee is at work on a given day."""

    date: datetime.date
    is_available: bool
    request_id: uuid.UUID | None = None
    leave_status: LeaveStatus | None = None
    leave_type: LeaveType | None = None
    is_half_day: bool = False


class EmployeeAvailability(BaseModel):
    """Daily availability of one employee over the range."""

    employee_id: uuid.UUID
    employee_name: str
    total_days: int
    available_days: int
    unavailable_days: int
    availability_percentage: float
    days: list[DayAvailability]


class AvailabilitySummary(BaseModel):
    """Roll-up of employee availability."""

    total_employees: int
    average_availability: float
    fully_available: int
    partially_available: int
    unavailable: int


class AvailabilityResponse(BaseModel):
    """Availability of several employees over a date range."""

    start_date: datetime.date
    end_date: datetime.date
    employees: list[EmployeeAvailability]
    summary: AvailabilitySummary
