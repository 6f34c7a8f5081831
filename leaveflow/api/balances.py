# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from leaveflow.api.deps import ActorDep, AdminDep
from leaveflow.db import SessionDep
from leaveflow.outcome import unwrap
from leaveflow.schemas.balance import BalanceListResponse, BalanceResponse, CreateBalancePayload
from leaveflow.services import balance as balance_service

employee_balance_router = APIRouter(prefix="/employees/{employee_id}/balances", tags=["balances"])

balance_admin_router = APIRouter(prefix="/balances", tags=["balances"])


@employee_balance_router.get("", response_model=BalanceListResponse)
async def list_employee_balances(
    employee_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
    fiscal_year: int | None = Query(default=None, ge=2000, le=2100),
) -> BalanceListResponse:
    """All balances of an employee for a fiscal year (current by default)."""
    return unwrap(await balance_service.list_employee_balances(session, actor, employee_id, fiscal_year))


@employee_balance_router.get("/{policy_id}", response_model=BalanceResponse)
async def get_balance(
    employee_id: uuid.UUID,
    policy_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
    fiscal_year: int | None = Query(default=None, ge=2000, le=2100),
) -> BalanceResponse:
    """One balance of an employee for a policy."""
    return unwrap(await balance_service.get_balance(session, actor, employee_id, policy_id, fiscal_year))


@balance_admin_router.post("", response_model=BalanceResponse, status_code=status.HTTP_201_CREATED)
async def create_balance(
    payload: CreateBalancePayload,
    session: SessionDep,
    actor: AdminDep,
) -> BalanceResponse:
    """Seed a balance for an employee, policy and fiscal year (admin only)."""
    return unwrap(await balance_service.create_balance(session, actor, payload))
