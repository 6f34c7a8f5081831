# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class BalanceResponse(BaseModel):
    """One employee's balance for a policy and fiscal year."""

    id: uuid.UUID
    employee_id: uuid.UUID
    policy_id: uuid.UUID
    fiscal_year: int
    entitled_days: Decimal
    used_days: Decimal
    pending_days: Decimal
    available_days: Decimal
    updated_at: datetime


class BalanceListResponse(BaseModel):
    """All balances of an employee for a fiscal year."""

    items: list[BalanceResponse]
    total: int


class CreateBalancePayload(BaseModel):
    """Request body for seeding a balance administratively."""

    employee_id: uuid.UUID
    policy_id: uuid.UUID
    fiscal_year: int = Field(ge=2000, le=2100)
    entitled_days: Decimal = Field(ge=0, max_digits=6, decimal_places=2)
