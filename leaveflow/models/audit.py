# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import UUIDBase, utc_now


class LeaveAuditLog(UUIDBase, table=True):
    """Immutable record of one state transition of a leave request."""

    __tablename__ = "leave_audit_log"
    __table_args__ = (sa.Index("ix_leave_audit_request_created", "request_id", "created_at"),)

    request_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_request.id"), nullable=False, index=True),
    )
    actor_id: uuid.UUID
    actor_role: str = Field(max_length=50)
    action: str = Field(max_length=50)
    approver_role: str | None = Field(default=None, max_length=50)
    previous_status: str | None = Field(default=None, max_length=50)
    new_status: str = Field(max_length=50)
    comments: str | None = None
    ip_address: str | None = Field(default=None, max_length=64)
    user_agent: str | None = Field(default=None, max_length=512)
    details_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    created_at: datetime = Field(
        default_factory=utc_now,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
