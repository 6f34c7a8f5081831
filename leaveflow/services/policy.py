# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leaveflow.exceptions import NotFound
from leaveflow.models.enums import ApprovalLevel, LeaveType
from leaveflow.models.policy import LeavePolicy
from leaveflow.schemas.policy import PolicyListResponse, PolicyResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.models.employee import Employee


def _build_policy_response(policy: LeavePolicy) -> PolicyResponse:
    """Build a PolicyResponse from the DB model."""
    return PolicyResponse(
        id=policy.id,
        code=policy.code,
        name=policy.name,
        leave_type=LeaveType(policy.leave_type),
        approval_level=ApprovalLevel(policy.approval_level),
        max_days_per_request=policy.max_days_per_request,
        min_notice_days=policy.min_notice_days,
        default_entitlement_days=policy.default_entitlement_days,
        escalation_threshold_days=policy.escalation_threshold_days,
        min_tenure_months=policy.min_tenure_months,
        half_day_allowed=policy.half_day_allowed,
        exclude_weekends=policy.exclude_weekends,
        exclude_holidays=policy.exclude_holidays,
        applicable_departments=list(policy.applicable_departments or []),
        applicable_locations=list(policy.applicable_locations or []),
        is_active=policy.is_active,
        created_at=policy.created_at,
    )


def policy_applies_to(policy: LeavePolicy, employee: Employee) -> bool:
    """Whether the policy's department and location scope covers the employee.

    An empty scope list means the policy applies everywhere.
    """
    departments = policy.applicable_departments or []
    locations = policy.applicable_locations or []
    if departments and employee.department not in departments:
        return False
    return not (locations and employee.location not in locations)


def months_of_service(hire_date: date, today: date) -> int:
    """Whole months between the hire date and today."""
    months = (today.year - hire_date.year) * 12 + today.month - hire_date.month
    if today.day < hire_date.day:
        months -= 1
    return months


def meets_tenure(policy: LeavePolicy, employee: Employee, today: date) -> bool:
    """Whether the employee has served the policy's minimum tenure.

    Employees without a recorded hire date are not held back.
    """
    if policy.min_tenure_months <= 0 or employee.hire_date is None:
        return True
    return months_of_service(employee.hire_date, today) >= policy.min_tenure_months


async def find_policy(session: AsyncSession, policy_id: uuid.UUID) -> LeavePolicy | None:
    result = await session.execute(select(LeavePolicy).where(col(LeavePolicy.id) == policy_id))
    return result.scalar_one_or_none()


async def get_policy(session: AsyncSession, policy_id: uuid.UUID) -> PolicyResponse:
    """Get a single policy or raise 404."""
    policy = await find_policy(session, policy_id)
    if policy is None:
        raise NotFound("Policy not found")
    return _build_policy_response(policy)


async def list_policies(
    session: AsyncSession,
    leave_type: LeaveType | None = None,
    department: str | None = None,
    location: str | None = None,
    active_only: bool = True,
    offset: int = 0,
    limit: int = 50,
) -> PolicyListResponse:
    """List policies, optionally only those applicable to a department or location."""
    base_filter = []
    if active_only:
        base_filter.append(col(LeavePolicy.is_active).is_(True))
    if leave_type is not None:
        base_filter.append(col(LeavePolicy.leave_type) == leave_type.value)

    result = await session.execute(select(LeavePolicy).where(*base_filter).order_by(col(LeavePolicy.code)))
    policies = list(result.scalars().all())

    # JSON scope lists are filtered in Python to stay portable across backends.
    if department is not None:
        policies = [p for p in policies if not p.applicable_departments or department in p.applicable_departments]
    if location is not None:
        policies = [p for p in policies if not p.applicable_locations or location in p.applicable_locations]

    page = policies[offset : offset + limit]
    return PolicyListResponse(
        items=[_build_policy_response(p) for p in page],
        total=len(policies),
    )
