# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import UUIDBase, utc_now
from leaveflow.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, table=True):
    """An employee's leave request with its approval workflow state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_employee_dates", "employee_id", "start_date", "end_date"),
        sa.Index("ix_leave_request_status_dates", "status", "start_date", "end_date"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id"), nullable=False, index=True),
    )
    policy_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_policy.id"), nullable=False, index=True),
    )
    leave_type: str = Field(max_length=50)
    approval_level: str = Field(max_length=50)
    fiscal_year: int
    start_date: date
    end_date: date
    total_days: Decimal = Field(sa_type=sa.Numeric(6, 2))
    is_half_day: bool = False
    half_day_session: str | None = Field(default=None, max_length=50)
    is_backdated: bool = False
    is_emergency: bool = False
    reason: str | None = None
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    applied_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
    )

    manager_approved_by: uuid.UUID | None = None
    manager_approval_status: str | None = Field(default=None, max_length=50)
    manager_decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    manager_comments: str | None = None
    hr_approved_by: uuid.UUID | None = None
    hr_approval_status: str | None = Field(default=None, max_length=50)
    hr_decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    hr_comments: str | None = None
    final_approved_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    rejected_by: uuid.UUID | None = None
    rejected_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    rejection_reason: str | None = None
    cancelled_by: uuid.UUID | None = None
    cancelled_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    cancellation_reason: str | None = None

    ip_address: str | None = Field(default=None, max_length=64)
    user_agent: str | None = Field(default=None, max_length=512)
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
