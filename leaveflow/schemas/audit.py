# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from leaveflow.models.enums import ActorRole, ApprovalStep, AuditAction, LeaveStatus


class AuditEntryResponse(BaseModel):
    """A single audit log entry."""

    id: uuid.UUID
    request_id: uuid.UUID
    actor_id: uuid.UUID
    actor_role: ActorRole
    action: AuditAction
    approver_role: ApprovalStep | None
    previous_status: LeaveStatus | None
    new_status: LeaveStatus
    comments: str | None
    ip_address: str | None
    user_agent: str | None
    details_json: dict[str, Any] | None
    created_at: datetime


class AuditTrailResponse(BaseModel):
    """Ordered history of a leave request."""

    request_id: uuid.UUID
    items: list[AuditEntryResponse]
    total: int
