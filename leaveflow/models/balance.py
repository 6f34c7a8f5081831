# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import UUIDBase, utc_now


class LeaveBalance(UUIDBase, table=True):
    """Per employee, policy and fiscal year entitlement with its reservations and usage.

    ``available_days`` is kept equal to ``entitled_days - used_days - pending_days``
    by every ledger write; ``version`` guards concurrent writers.
    """

    __tablename__ = "leave_balance"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "policy_id", "fiscal_year", name="uq_balance_employee_policy_year"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id"), nullable=False, index=True),
    )
    policy_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_policy.id"), nullable=False, index=True),
    )
    fiscal_year: int
    entitled_days: Decimal = Field(default=Decimal("0"), sa_type=sa.Numeric(6, 2))
    used_days: Decimal = Field(default=Decimal("0"), sa_type=sa.Numeric(6, 2))
    pending_days: Decimal = Field(default=Decimal("0"), sa_type=sa.Numeric(6, 2))
    available_days: Decimal = Field(default=Decimal("0"), sa_type=sa.Numeric(6, 2))
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
