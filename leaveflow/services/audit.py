# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlmodel import col

from leaveflow.models.audit import LeaveAuditLog
from leaveflow.models.enums import ActorRole, ApprovalStep, AuditAction, LeaveStatus
from leaveflow.schemas.audit import AuditEntryResponse, AuditTrailResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from leaveflow.models.request import LeaveRequest
    from leaveflow.schemas.auth import Actor, RequestMeta


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        elif isinstance(value, Decimal):
            data[key] = str(value)
        else:
            data[key] = value
    return data


def _build_entry_response(entry: LeaveAuditLog) -> AuditEntryResponse:
    return AuditEntryResponse(
        id=entry.id,
        request_id=entry.request_id,
        actor_id=entry.actor_id,
        actor_role=ActorRole(entry.actor_role),
        action=AuditAction(entry.action),
        approver_role=ApprovalStep(entry.approver_role) if entry.approver_role else None,
        previous_status=LeaveStatus(entry.previous_status) if entry.previous_status else None,
        new_status=LeaveStatus(entry.new_status),
        comments=entry.comments,
        ip_address=entry.ip_address,
        user_agent=entry.user_agent,
        details_json=entry.details_json,
        created_at=entry.created_at,
    )


async def record_transition(
    session: AsyncSession,
    request: LeaveRequest,
    actor: Actor,
    action: AuditAction,
    *,
    previous_status: LeaveStatus | None,
    approver_role: ApprovalStep | None = None,
    comments: str | None = None,
    meta: RequestMeta | None = None,
    details: dict[str, Any] | None = None,
) -> LeaveAuditLog:
    """Append an audit entry for a request transition within the caller's transaction.

    The entry is flushed immediately so a failing audit store aborts the
    transition it describes. ``details`` is merged into the request snapshot.
    """
    entry = LeaveAuditLog(
        request_id=request.id,
        actor_id=actor.id,
        actor_role=actor.role.value,
        action=action.value,
        approver_role=approver_role.value if approver_role else None,
        previous_status=previous_status.value if previous_status else None,
        new_status=request.status,
        comments=comments,
        ip_address=meta.ip_address if meta else None,
        user_agent=meta.user_agent if meta else None,
        details_json={**model_to_audit_dict(request), **(details or {})},
    )
    session.add(entry)
    await session.flush()
    return entry


async def list_entries(session: AsyncSession, request_id: uuid.UUID) -> AuditTrailResponse:
    """Return a request's audit entries, oldest first."""
    result = await session.execute(
        select(LeaveAuditLog)
        .where(col(LeaveAuditLog.request_id) == request_id)
        .order_by(col(LeaveAuditLog.created_at), col(LeaveAuditLog.id))
    )
    entries = list(result.scalars().all())
    return AuditTrailResponse(
        request_id=request_id,
        items=[_build_entry_response(e) for e in entries],
        total=len(entries),
    )
