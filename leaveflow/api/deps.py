# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request

from leaveflow.exceptions import Forbidden
from leaveflow.models.enums import ActorRole
from leaveflow.schemas.auth import Actor, RequestMeta


async def get_actor(
    x_user_id: uuid.UUID = Header(),
    x_role: ActorRole = Header(default=ActorRole.EMPLOYEE),
    x_department: str | None = Header(default=None),
    x_employee_id: uuid.UUID | None = Header(default=None),
) -> Actor:
    """Build the caller from identity headers set by the upstream auth layer."""
    return Actor(id=x_user_id, role=x_role, department=x_department, employee_id=x_employee_id)


ActorDep = Annotated[Actor, Depends(get_actor)]


async def require_admin(actor: ActorDep) -> Actor:
    """Require the ADMIN (HR) role for the request."""
    if not actor.is_admin:
        raise Forbidden("Admin access required")
    return actor


AdminDep = Annotated[Actor, Depends(require_admin)]


async def get_request_meta(request: Request) -> RequestMeta:
    """Client address and user agent recorded in the audit trail."""
    return RequestMeta(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


MetaDep = Annotated[RequestMeta, Depends(get_request_meta)]
