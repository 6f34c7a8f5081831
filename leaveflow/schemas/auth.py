# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, field_validator

from leaveflow.models.enums import ActorRole

IP_ADDRESS_MAX_LENGTH = 64
USER_AGENT_MAX_LENGTH = 512


class Actor(BaseModel):
    """Authenticated caller as resolved by the upstream identity layer."""

    id: uuid.UUID
    role: ActorRole = ActorRole.EMPLOYEE
    department: str | None = None
    employee_id: uuid.UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN

    def owns(self, employee_id: uuid.UUID) -> bool:
        """Whether the actor is the employee in question."""
        return self.employee_id is not None and self.employee_id == employee_id


class RequestMeta(BaseModel):
    """Client metadata captured alongside a mutation for the audit trail."""

    ip_address: str | None = None
    user_agent: str | None = None

    @field_validator("ip_address")
    @classmethod
    def truncate_ip_address(cls, v: str | None) -> str | None:
        return v[:IP_ADDRESS_MAX_LENGTH] if v else v

    @field_validator("user_agent")
    @classmethod
    def truncate_user_agent(cls, v: str | None) -> str | None:
        return v[:USER_AGENT_MAX_LENGTH] if v else v
