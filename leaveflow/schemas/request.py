# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator

from leaveflow.models.enums import (
    ApprovalLevel,
    ApprovalStep,
    DecisionStatus,
    HalfDaySession,
    LeaveStatus,
    LeaveType,
)
from leaveflow.schemas.employee import EmployeeSummary

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitLeavePayload(BaseModel):
    """Request body for filing a new leave request."""

    employee_id: uuid.UUID
    policy_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=2000)
    is_emergency: bool = False
    is_half_day: bool = False
    half_day_session: HalfDaySession | None = None

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must not be before start_date"
            raise ValueError(msg)
        if self.is_half_day and self.start_date != self.end_date:
            msg = "a half-day request must start and end on the same date"
            raise ValueError(msg)
        if self.half_day_session is not None and not self.is_half_day:
            msg = "half_day_session is only valid for half-day requests"
            raise ValueError(msg)
        return self


class DecisionPayload(BaseModel):
    """Request body for approve/reject actions."""

    comments: str | None = Field(default=None, max_length=1000)


class CancelPayload(BaseModel):
    """Request body for cancelling a request."""

    reason: str | None = Field(default=None, max_length=1000)


SortField = Literal["applied_at", "start_date", "end_date", "status", "total_days", "leave_type", "employee_name"]
SearchField = Literal["all", "reason", "employee_name", "employee_email", "comments"]


class LeaveRequestFilter(BaseModel):
    """Filters, sorting and paging for listing leave requests."""

    status: LeaveStatus | None = None
    statuses: list[LeaveStatus] | None = None
    leave_type: LeaveType | None = None
    employee_id: uuid.UUID | None = None
    department: str | None = None
    start_from: date | None = None
    end_to: date | None = None
    applied_from: datetime | None = None
    applied_to: datetime | None = None
    is_emergency: bool | None = None
    is_backdated: bool | None = None
    min_days: Decimal | None = Field(default=None, ge=0)
    max_days: Decimal | None = Field(default=None, ge=0)
    search: str | None = Field(default=None, min_length=1, max_length=200)
    search_field: SearchField = "all"
    sort_by: SortField = "applied_at"
    sort_order: Literal["asc", "desc"] = "desc"
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=50, ge=1, le=100)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    policy_id: uuid.UUID
    leave_type: LeaveType
    approval_level: ApprovalLevel
    fiscal_year: int
    start_date: date
    end_date: date
    total_days: Decimal
    is_half_day: bool
    half_day_session: HalfDaySession | None
    is_backdated: bool
    is_emergency: bool
    reason: str | None
    status: LeaveStatus
    next_approver: ApprovalStep
    applied_at: datetime
    manager_approved_by: uuid.UUID | None
    manager_approval_status: DecisionStatus | None
    manager_decided_at: datetime | None
    manager_comments: str | None
    hr_approved_by: uuid.UUID | None
    hr_approval_status: DecisionStatus | None
    hr_decided_at: datetime | None
    hr_comments: str | None
    final_approved_at: datetime | None
    rejected_by: uuid.UUID | None
    rejected_at: datetime | None
    rejection_reason: str | None
    cancelled_by: uuid.UUID | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    employee: EmployeeSummary | None = None


class RequestSummary(BaseModel):
    """Aggregate figures over a filtered set of requests."""

    total: int
    pending: int
    approved: int
    rejected: int
    cancelled: int
    average_days: Decimal


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
    offset: int
    limit: int
    summary: RequestSummary


class ApprovalQueueItem(LeaveRequestResponse):
    """A pending request awaiting the caller's decision."""

    expected_decision_date: date
    is_overdue: bool
    days_waiting: int


class ApprovalQueueResponse(BaseModel):
    """Requests awaiting the caller's decision, oldest first."""

    items: list[ApprovalQueueItem]
    total: int
    overdue: int
