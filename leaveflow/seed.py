"""Seed script for development data.

Run with:  python -m leaveflow.seed

Reference data (employees, policies, holidays) is written directly because the
service treats it as read-only; sample requests go through the engine so their
balances and audit trail are consistent.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from leaveflow.db import dispose_engine, get_session_factory
from leaveflow.models.employee import Employee
from leaveflow.models.enums import ActorRole, ApprovalLevel, LeaveType
from leaveflow.models.holiday import Holiday
from leaveflow.models.policy import LeavePolicy
from leaveflow.models.request import LeaveRequest
from leaveflow.outcome import Failure
from leaveflow.schemas.auth import Actor
from leaveflow.schemas.request import SubmitLeavePayload
from leaveflow.services import request as request_service
from leaveflow.services.duration import add_business_days
from leaveflow.services.fiscal import current_fiscal_year, fiscal_year_bounds

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

ADMIN_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# Well-known employee UUIDs
ALICE_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
BOB_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")
CAROL_ID = uuid.UUID("00000000-0000-0000-0000-000000000004")
DAVE_ID = uuid.UUID("00000000-0000-0000-0000-000000000005")
ERIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000006")

EMPLOYEES: list[dict[str, Any]] = [
    {
        "id": ALICE_ID,
        "first_name": "Alice",
        "last_name": "Johnson",
        "email": "alice.johnson@example.com",
        "department": "Engineering",
        "location": "Bengaluru",
        "role": ActorRole.MANAGER,
        "hire_date": date(2019, 6, 3),
    },
    {
        "id": BOB_ID,
        "first_name": "Bob",
        "last_name": "Smith",
        "email": "bob.smith@example.com",
        "department": "Engineering",
        "location": "Bengaluru",
        "role": ActorRole.EMPLOYEE,
        "hire_date": date(2022, 1, 10),
        "manager_id": ALICE_ID,
    },
    {
        "id": CAROL_ID,
        "first_name": "Carol",
        "last_name": "Williams",
        "email": "carol.williams@example.com",
        "department": "Engineering",
        "location": "Pune",
        "role": ActorRole.EMPLOYEE,
        "hire_date": date(2023, 8, 21),
        "manager_id": ALICE_ID,
    },
    {
        "id": DAVE_ID,
        "first_name": "Dave",
        "last_name": "Brown",
        "email": "dave.brown@example.com",
        "department": "Sales",
        "location": "Mumbai",
        "role": ActorRole.EMPLOYEE,
        "hire_date": date(2020, 3, 16),
    },
    {
        "id": ERIN_ID,
        "first_name": "Erin",
        "last_name": "Davis",
        "email": "erin.davis@example.com",
        "department": "People",
        "location": "Mumbai",
        "role": ActorRole.ADMIN,
        "hire_date": date(2018, 11, 5),
    },
]

POLICIES: list[dict[str, Any]] = [
    {
        "code": "ANNUAL",
        "name": "Annual Leave",
        "leave_type": LeaveType.ANNUAL,
        "approval_level": ApprovalLevel.MANAGER,
        "max_days_per_request": Decimal("15"),
        "min_notice_days": 7,
        "default_entitlement_days": Decimal("21"),
        "escalation_threshold_days": Decimal("10"),
    },
    {
        "code": "SICK",
        "name": "Sick Leave",
        "leave_type": LeaveType.SICK,
        "approval_level": ApprovalLevel.MANAGER,
        "max_days_per_request": Decimal("10"),
        "min_notice_days": 0,
        "default_entitlement_days": Decimal("12"),
    },
    {
        "code": "CASUAL",
        "name": "Casual Leave",
        "leave_type": LeaveType.CASUAL,
        "approval_level": ApprovalLevel.MANAGER,
        "max_days_per_request": Decimal("3"),
        "min_notice_days": 1,
        "default_entitlement_days": Decimal("8"),
    },
    {
        "code": "MATERNITY",
        "name": "Maternity Leave",
        "leave_type": LeaveType.MATERNITY,
        "approval_level": ApprovalLevel.BOTH,
        "max_days_per_request": Decimal("130"),
        "min_notice_days": 30,
        "default_entitlement_days": Decimal("130"),
        "min_tenure_months": 6,
        "half_day_allowed": False,
    },
    {
        "code": "UNPAID",
        "name": "Unpaid Leave",
        "leave_type": LeaveType.UNPAID,
        "approval_level": ApprovalLevel.HR,
        "max_days_per_request": Decimal("30"),
        "min_notice_days": 14,
        "default_entitlement_days": Decimal("30"),
    },
]

# (month, day, name, location); None applies to every location.
HOLIDAYS: list[tuple[int, int, str, str | None]] = [
    (8, 15, "Independence Day", None),
    (10, 2, "Gandhi Jayanti", None),
    (1, 26, "Republic Day", None),
    (9, 19, "Ganesh Chaturthi", "Mumbai"),
    (9, 19, "Ganesh Chaturthi", "Pune"),
    (11, 1, "Karnataka Rajyotsava", "Bengaluru"),
]


def _previous_weekday(day: date) -> date:
    previous = day - timedelta(days=1)
    while previous.weekday() >= 5:
        previous -= timedelta(days=1)
    return previous


async def seed_employees(session: AsyncSession) -> int:
    """Insert missing employees."""
    print("\n--- Seeding employees ---")
    created = 0
    for data in EMPLOYEES:
        if await session.get(Employee, data["id"]) is not None:
            print(f"  [SKIP] {data['email']} (already exists)")
            continue
        session.add(Employee(**data))
        created += 1
        print(f"  [OK] {data['email']}")
    await session.commit()
    return created


async def seed_policies(session: AsyncSession) -> dict[str, uuid.UUID]:
    """Insert missing policies and return their ids by code."""
    print("\n--- Seeding policies ---")
    policy_ids: dict[str, uuid.UUID] = {}
    for data in POLICIES:
        result = await session.execute(select(LeavePolicy).where(col(LeavePolicy.code) == data["code"]))
        policy = result.scalar_one_or_none()
        if policy is not None:
            print(f"  [SKIP] {data['code']} (already exists)")
        else:
            policy = LeavePolicy(**data)
            session.add(policy)
            await session.flush()
            print(f"  [OK] {data['code']}")
        policy_ids[data["code"]] = policy.id
    await session.commit()
    return policy_ids


async def seed_holidays(session: AsyncSession, fiscal_year: int) -> int:
    """Insert the fiscal year's holidays that are not there yet."""
    print("\n--- Seeding holidays ---")
    first, last = fiscal_year_bounds(fiscal_year)
    created = 0
    for month, day, name, location in HOLIDAYS:
        holiday_date = date(first.year if month >= first.month else last.year, month, day)
        result = await session.execute(
            select(Holiday).where(
                col(Holiday.date) == holiday_date,
                col(Holiday.location).is_(None) if location is None else col(Holiday.location) == location,
            )
        )
        if result.scalar_one_or_none() is not None:
            print(f"  [SKIP] {holiday_date} {name}")
            continue
        session.add(Holiday(date=holiday_date, name=name, location=location, fiscal_year=fiscal_year))
        created += 1
        print(f"  [OK] {holiday_date} {name} ({location or 'all locations'})")
    await session.commit()
    return created


async def seed_requests(session: AsyncSession, policy_ids: dict[str, uuid.UUID]) -> int:
    """File a few sample requests through the engine when none exist yet."""
    print("\n--- Seeding requests ---")
    existing = await session.execute(select(func.count()).select_from(LeaveRequest))
    if existing.scalar_one() > 0:
        print("  [SKIP] requests already present")
        return 0

    admin = Actor(id=ADMIN_USER_ID, role=ActorRole.ADMIN)
    start = add_business_days(date.today(), 10)
    samples = [
        SubmitLeavePayload(
            employee_id=BOB_ID,
            policy_id=policy_ids["ANNUAL"],
            start_date=start,
            end_date=add_business_days(start, 2),
            reason="Family trip",
        ),
        SubmitLeavePayload(
            employee_id=CAROL_ID,
            policy_id=policy_ids["CASUAL"],
            start_date=start,
            end_date=start,
            is_half_day=True,
            reason="Appointment",
        ),
        SubmitLeavePayload(
            employee_id=DAVE_ID,
            policy_id=policy_ids["SICK"],
            start_date=_previous_weekday(date.today()),
            end_date=_previous_weekday(date.today()),
            is_emergency=True,
            reason="Flu",
        ),
    ]

    created = 0
    for payload in samples:
        outcome = await request_service.submit_request(session, admin, payload)
        if isinstance(outcome, Failure):
            print(f"  [ERROR] {payload.employee_id}: {outcome.error_type}: {outcome.error.message}")
            continue
        created += 1
        print(f"  [OK] {outcome.value.leave_type} for {payload.employee_id} ({outcome.value.total_days} days)")
    return created


async def seed(session: AsyncSession) -> dict[str, uuid.UUID]:
    """Seed all development data. Safe to run repeatedly."""
    await seed_employees(session)
    policy_ids = await seed_policies(session)
    await seed_holidays(session, current_fiscal_year())
    await seed_requests(session, policy_ids)
    return policy_ids


async def main() -> None:
    """Run the seed against the configured database."""
    print("=" * 60)
    print("  LeaveFlow - Development Seed Script")
    print("=" * 60)

    async with get_session_factory()() as session:
        await seed(session)
    await dispose_engine()

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
