# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from leaveflow.models.enums import ApprovalLevel, LeaveType


class PolicyResponse(BaseModel):
    """Response schema for a leave policy."""

    id: uuid.UUID
    code: str
    name: str
    leave_type: LeaveType
    approval_level: ApprovalLevel
    max_days_per_request: Decimal
    min_notice_days: int
    default_entitlement_days: Decimal
    escalation_threshold_days: Decimal | None
    min_tenure_months: int
    half_day_allowed: bool
    exclude_weekends: bool
    exclude_holidays: bool
    applicable_departments: list[str]
    applicable_locations: list[str]
    is_active: bool
    created_at: datetime


class PolicyListResponse(BaseModel):
    """List of leave policies."""

    items: list[PolicyResponse]
    total: int
