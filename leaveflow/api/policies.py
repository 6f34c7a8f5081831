# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from leaveflow.api.deps import ActorDep
from leaveflow.db import SessionDep
from leaveflow.models.enums import LeaveType
from leaveflow.schemas.policy import PolicyListResponse, PolicyResponse
from leaveflow.services import policy as policy_service

router = APIRouter(prefix="/policies", tags=["policies"])


@router.get("", response_model=PolicyListResponse)
async def list_policies(
    session: SessionDep,
    actor: ActorDep,
    leave_type: LeaveType | None = Query(default=None),
    department: str | None = Query(default=None),
    location: str | None = Query(default=None),
    active_only: bool = Query(default=True),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> PolicyListResponse:
    """List leave policies."""
    return await policy_service.list_policies(session, leave_type, department, location, active_only, offset, limit)


@router.get("/{policy_id}", response_model=PolicyResponse)
async def get_policy(
    policy_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
) -> PolicyResponse:
    """Get a leave policy."""
    return await policy_service.get_policy(session, policy_id)
