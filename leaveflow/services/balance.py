"""Balance ledger: the only writer of ``leave_balance`` rows.

Ledger mutations run inside the caller's transaction. Each one locks the row,
validates against what it read, and writes with an UPDATE guarded by the
version it saw, so a concurrent writer that slipped past the lock surfaces as
a ConcurrencyConflict instead of a lost update.
"""

# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from leaveflow.exceptions import (
    AppError,
    ConcurrencyConflict,
    Forbidden,
    InsufficientBalance,
    NotFound,
    ValidationError,
)
from leaveflow.models.balance import LeaveBalance
from leaveflow.models.base import utc_now
from leaveflow.schemas.balance import BalanceListResponse, BalanceResponse
from leaveflow.services.employee import can_view_employee, get_employee_directory
from leaveflow.services.fiscal import current_fiscal_year
from leaveflow.services.policy import find_policy
from leaveflow.services.transaction import run_mutation, run_query

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.models.policy import LeavePolicy
    from leaveflow.outcome import Failure, Success
    from leaveflow.schemas.auth import Actor
    from leaveflow.schemas.balance import CreateBalancePayload

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_balance_response(balance: LeaveBalance) -> BalanceResponse:
    """Map a balance model to its response schema."""
    return BalanceResponse(
        id=balance.id,
        employee_id=balance.employee_id,
        policy_id=balance.policy_id,
        fiscal_year=balance.fiscal_year,
        entitled_days=balance.entitled_days,
        used_days=balance.used_days,
        pending_days=balance.pending_days,
        available_days=balance.available_days,
        updated_at=balance.updated_at,
    )


def _balance_query(employee_id: uuid.UUID, policy_id: uuid.UUID, fiscal_year: int) -> Select[tuple[LeaveBalance]]:
    return select(LeaveBalance).where(
        col(LeaveBalance.employee_id) == employee_id,
        col(LeaveBalance.policy_id) == policy_id,
        col(LeaveBalance.fiscal_year) == fiscal_year,
    )


async def _apply(
    session: AsyncSession,
    balance: LeaveBalance,
    *,
    pending_delta: Decimal = _ZERO,
    used_delta: Decimal = _ZERO,
) -> LeaveBalance:
    """Write new pending/used figures, guarded by the version read under lock."""
    pending = balance.pending_days + pending_delta
    used = balance.used_days + used_delta
    if pending < 0 or used < 0:
        raise AppError(f"Balance ledger is inconsistent for balance {balance.id}")
    available = balance.entitled_days - used - pending

    result = await session.execute(
        update(LeaveBalance)
        .where(col(LeaveBalance.id) == balance.id, col(LeaveBalance.version) == balance.version)
        .values(
            pending_days=pending,
            used_days=used,
            available_days=available,
            version=balance.version + 1,
            updated_at=utc_now(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:  # ty: ignore[unresolved-attribute]
        raise ConcurrencyConflict("Leave balance was modified concurrently; retry")

    await session.refresh(balance)
    return balance


# ---------------------------------------------------------------------------
# Ledger operations
# ---------------------------------------------------------------------------


async def lock_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    policy: LeavePolicy,
    fiscal_year: int,
) -> LeaveBalance:
    """Get the balance row with a FOR UPDATE lock, creating it if absent.

    A missing row is created from the policy's default entitlement. Losing a
    creation race to another transaction is reported as a ConcurrencyConflict.
    """
    result = await session.execute(
        _balance_query(employee_id, policy.id, fiscal_year)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    balance = result.scalar_one_or_none()
    if balance is not None:
        return balance

    entitled = policy.default_entitlement_days
    balance = LeaveBalance(
        employee_id=employee_id,
        policy_id=policy.id,
        fiscal_year=fiscal_year,
        entitled_days=entitled,
        used_days=_ZERO,
        pending_days=_ZERO,
        available_days=entitled,
        version=1,
    )
    session.add(balance)
    try:
        await session.flush()
    except IntegrityError:
        raise ConcurrencyConflict("Leave balance was created concurrently; retry") from None

    logger.info(
        "Created balance for employee %s policy %s FY%d with %s days", employee_id, policy.id, fiscal_year, entitled
    )
    return balance


async def lock_existing_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    policy_id: uuid.UUID,
    fiscal_year: int,
) -> LeaveBalance:
    """Lock the balance a request was charged to; its absence is an inconsistency."""
    result = await session.execute(
        _balance_query(employee_id, policy_id, fiscal_year)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    balance = result.scalar_one_or_none()
    if balance is None:
        raise AppError(f"No balance for employee {employee_id} policy {policy_id} FY{fiscal_year}")
    return balance


async def reserve(session: AsyncSession, balance: LeaveBalance, days: Decimal) -> LeaveBalance:
    """Hold ``days`` for a pending request."""
    if balance.available_days < days:
        raise InsufficientBalance(
            f"Insufficient leave balance: {balance.available_days} days available, {days} requested"
        )
    return await _apply(session, balance, pending_delta=days)


async def commit(session: AsyncSession, balance: LeaveBalance, days: Decimal) -> LeaveBalance:
    """Convert a reservation into usage on final approval."""
    return await _apply(session, balance, pending_delta=-days, used_delta=days)


async def release(session: AsyncSession, balance: LeaveBalance, days: Decimal) -> LeaveBalance:
    """Drop a reservation on rejection or cancellation of a pending request."""
    return await _apply(session, balance, pending_delta=-days)


async def restore(session: AsyncSession, balance: LeaveBalance, days: Decimal) -> LeaveBalance:
    """Give back usage when an approved request is cancelled."""
    return await _apply(session, balance, used_delta=-days)


async def available(
    session: AsyncSession,
    employee_id: uuid.UUID,
    policy_id: uuid.UUID,
    fiscal_year: int,
) -> Decimal:
    """Days currently available; zero when no balance exists yet."""
    result = await session.execute(_balance_query(employee_id, policy_id, fiscal_year))
    balance = result.scalar_one_or_none()
    return balance.available_days if balance is not None else _ZERO


# ---------------------------------------------------------------------------
# Read and admin operations
# ---------------------------------------------------------------------------


async def _ensure_can_view(session: AsyncSession, actor: Actor, employee_id: uuid.UUID) -> None:
    employee = await get_employee_directory(session).get_employee(employee_id)
    if employee is None:
        raise NotFound("Employee not found")
    if not can_view_employee(actor, employee):
        raise Forbidden("Not allowed to view this employee's balances")


async def _get_balance(
    session: AsyncSession,
    actor: Actor,
    employee_id: uuid.UUID,
    policy_id: uuid.UUID,
    fiscal_year: int | None = None,
) -> BalanceResponse:
    await _ensure_can_view(session, actor, employee_id)
    year = fiscal_year if fiscal_year is not None else current_fiscal_year()
    result = await session.execute(_balance_query(employee_id, policy_id, year))
    balance = result.scalar_one_or_none()
    if balance is None:
        raise NotFound("Balance not found")
    return _build_balance_response(balance)


async def _list_employee_balances(
    session: AsyncSession,
    actor: Actor,
    employee_id: uuid.UUID,
    fiscal_year: int | None = None,
) -> BalanceListResponse:
    await _ensure_can_view(session, actor, employee_id)
    year = fiscal_year if fiscal_year is not None else current_fiscal_year()
    result = await session.execute(
        select(LeaveBalance)
        .where(col(LeaveBalance.employee_id) == employee_id, col(LeaveBalance.fiscal_year) == year)
        .order_by(col(LeaveBalance.policy_id))
    )
    balances = list(result.scalars().all())
    return BalanceListResponse(
        items=[_build_balance_response(b) for b in balances],
        total=len(balances),
    )


async def _create_balance(session: AsyncSession, actor: Actor, payload: CreateBalancePayload) -> BalanceResponse:
    """Seed a balance administratively.

    Flow:
    1. Require an admin actor
    2. Verify the employee and policy exist
    3. Refuse duplicates for the same employee, policy and fiscal year
    4. Insert with nothing used or pending
    """
    if not actor.is_admin:
        raise Forbidden("Admin access required")

    if await get_employee_directory(session).get_employee(payload.employee_id) is None:
        raise NotFound("Employee not found")
    if await find_policy(session, payload.policy_id) is None:
        raise NotFound("Policy not found")

    existing = await session.execute(_balance_query(payload.employee_id, payload.policy_id, payload.fiscal_year))
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("Balance already exists for this employee, policy and fiscal year", status_code=409)

    balance = LeaveBalance(
        employee_id=payload.employee_id,
        policy_id=payload.policy_id,
        fiscal_year=payload.fiscal_year,
        entitled_days=payload.entitled_days,
        used_days=_ZERO,
        pending_days=_ZERO,
        available_days=payload.entitled_days,
    )
    session.add(balance)
    try:
        await session.flush()
    except IntegrityError:
        raise ConcurrencyConflict("Leave balance was created concurrently; retry") from None

    logger.info("Admin %s created balance %s", actor.id, balance.id)
    return _build_balance_response(balance)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def get_balance(
    session: AsyncSession,
    actor: Actor,
    employee_id: uuid.UUID,
    policy_id: uuid.UUID,
    fiscal_year: int | None = None,
) -> Success[BalanceResponse] | Failure:
    """Get one balance; the fiscal year defaults to the current one."""
    return await run_query(session, _get_balance, actor, employee_id, policy_id, fiscal_year)


async def list_employee_balances(
    session: AsyncSession,
    actor: Actor,
    employee_id: uuid.UUID,
    fiscal_year: int | None = None,
) -> Success[BalanceListResponse] | Failure:
    """List an employee's balances for a fiscal year."""
    return await run_query(session, _list_employee_balances, actor, employee_id, fiscal_year)


async def create_balance(
    session: AsyncSession,
    actor: Actor,
    payload: CreateBalancePayload,
) -> Success[BalanceResponse] | Failure:
    """Create a balance row (admin only)."""
    return await run_mutation(session, _create_balance, actor, payload)
