# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from fastapi import APIRouter, Query, status

from leaveflow.api.deps import ActorDep, MetaDep
from leaveflow.db import SessionDep
from leaveflow.models.enums import LeaveStatus, LeaveType
from leaveflow.outcome import unwrap
from leaveflow.schemas.audit import AuditTrailResponse
from leaveflow.schemas.request import (
    ApprovalQueueResponse,
    CancelPayload,
    DecisionPayload,
    LeaveRequestFilter,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    SearchField,
    SortField,
    SubmitLeavePayload,
)
from leaveflow.services import request as request_service

requests_router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: SubmitLeavePayload,
    session: SessionDep,
    actor: ActorDep,
    meta: MetaDep,
) -> LeaveRequestResponse:
    """Submit a new leave request."""
    return unwrap(await request_service.submit_request(session, actor, payload, meta))


@requests_router.get("", response_model=LeaveRequestListResponse)
async def list_requests(
    session: SessionDep,
    actor: ActorDep,
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    statuses: Annotated[list[LeaveStatus] | None, Query()] = None,
    leave_type: LeaveType | None = Query(default=None),
    employee_id: uuid.UUID | None = Query(default=None),
    department: str | None = Query(default=None),
    start_from: date | None = Query(default=None),
    end_to: date | None = Query(default=None),
    applied_from: datetime | None = Query(default=None),
    applied_to: datetime | None = Query(default=None),
    is_emergency: bool | None = Query(default=None),
    is_backdated: bool | None = Query(default=None),
    min_days: Decimal | None = Query(default=None, ge=0),
    max_days: Decimal | None = Query(default=None, ge=0),
    search: str | None = Query(default=None, min_length=1, max_length=200),
    search_field: SearchField = Query(default="all"),
    sort_by: SortField = Query(default="applied_at"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List leave requests visible to the caller."""
    filters = LeaveRequestFilter(
        status=status_filter,
        statuses=statuses,
        leave_type=leave_type,
        employee_id=employee_id,
        department=department,
        start_from=start_from,
        end_to=end_to,
        applied_from=applied_from,
        applied_to=applied_to,
        is_emergency=is_emergency,
        is_backdated=is_backdated,
        min_days=min_days,
        max_days=max_days,
        search=search,
        search_field=search_field,
        sort_by=sort_by,
        sort_order=sort_order,
        offset=offset,
        limit=limit,
    )
    return unwrap(await request_service.list_requests(session, actor, filters))


@requests_router.get("/approval-queue", response_model=ApprovalQueueResponse)
async def get_approval_queue(
    session: SessionDep,
    actor: ActorDep,
    status_filter: Literal["pending", "overdue", "all"] = Query(default="all", alias="status"),
    priority: Literal["all", "emergency", "long"] = Query(default="all"),
) -> ApprovalQueueResponse:
    """Pending requests waiting on the caller's decision."""
    return unwrap(await request_service.get_approval_queue(session, actor, status_filter, priority))


@requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
) -> LeaveRequestResponse:
    """Get a single leave request."""
    return unwrap(await request_service.get_request(session, actor, request_id))


@requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
    meta: MetaDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequestResponse:
    """Approve a pending request at the caller's approval step."""
    return unwrap(await request_service.approve_request(session, actor, request_id, payload, meta))


@requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
    meta: MetaDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a pending request at the caller's approval step."""
    return unwrap(await request_service.reject_request(session, actor, request_id, payload, meta))


@requests_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
    meta: MetaDep,
    payload: CancelPayload | None = None,
) -> LeaveRequestResponse:
    """Cancel a pending request, or an approved one before it starts."""
    return unwrap(await request_service.cancel_request(session, actor, request_id, payload, meta))


@requests_router.get("/{request_id}/audit", response_model=AuditTrailResponse)
async def get_audit_trail(
    request_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
) -> AuditTrailResponse:
    """Audit history of a request, oldest first."""
    return unwrap(await request_service.get_audit_trail(session, actor, request_id))
