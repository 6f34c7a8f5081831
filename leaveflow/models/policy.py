# ruff: noqa: TC003
from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import TimestampMixin, UUIDBase
from leaveflow.models.enums import ApprovalLevel


class LeavePolicy(UUIDBase, TimestampMixin, table=True):
    """Rules for one leave type, optionally scoped to departments or locations.

    Requests snapshot the leave type and effective approval level when they are
    filed, so edits to a policy only affect requests filed afterwards.
    """

    __tablename__ = "leave_policy"
    __table_args__ = (sa.UniqueConstraint("code", name="uq_leave_policy_code"),)

    code: str = Field(max_length=100)
    name: str = Field(max_length=255)
    leave_type: str = Field(max_length=50, index=True)
    approval_level: str = Field(
        default=ApprovalLevel.MANAGER, max_length=50, sa_column_kwargs={"server_default": "MANAGER"}
    )
    max_days_per_request: Decimal = Field(sa_type=sa.Numeric(6, 2))
    min_notice_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    default_entitlement_days: Decimal = Field(default=Decimal("0"), sa_type=sa.Numeric(6, 2))
    escalation_threshold_days: Decimal | None = Field(default=None, sa_type=sa.Numeric(6, 2))
    min_tenure_months: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    half_day_allowed: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    exclude_weekends: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    exclude_holidays: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    applicable_departments: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    applicable_locations: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    is_active: bool = Field(default=True, index=True, sa_column_kwargs={"server_default": sa.true()})
