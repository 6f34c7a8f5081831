from __future__ import annotations

import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import col

from leaveflow.db import get_session
from leaveflow.main import app
from leaveflow.models import (
    ActorRole,
    ApprovalLevel,
    Employee,
    Holiday,
    LeaveAuditLog,
    LeaveBalance,
    LeavePolicy,
    LeaveRequest,
    LeaveType,
    SQLModel,
)
from leaveflow.schemas.auth import Actor
from leaveflow.services.fiscal import current_fiscal_year, fiscal_year_for

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Create a fresh SQLite database file for each test."""
    _engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'leaveflow.db'}",
        connect_args={"timeout": 30},
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Yield a session for calling engine operations directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class Factory:
    """Inserts reference data and reads back state through short-lived sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _save(self, obj: Any) -> Any:
        async with self._session_factory() as session:
            session.add(obj)
            await session.commit()
        return obj

    # ----- Reference data -----

    async def employee(
        self,
        *,
        first_name: str = "Test",
        last_name: str = "Employee",
        department: str = "Engineering",
        location: str | None = "Bengaluru",
        role: ActorRole = ActorRole.EMPLOYEE,
        is_active: bool = True,
        hire_date: date | None = None,
    ) -> Employee:
        return await self._save(
            Employee(
                first_name=first_name,
                last_name=last_name,
                email=f"{first_name.lower()}.{uuid.uuid4().hex[:8]}@example.com",
                department=department,
                location=location,
                role=role,
                is_active=is_active,
                hire_date=hire_date,
            )
        )

    async def manager(self, department: str = "Engineering", **kwargs: Any) -> Employee:
        kwargs.setdefault("first_name", "Maria")
        return await self.employee(department=department, role=ActorRole.MANAGER, **kwargs)

    async def hr(self, **kwargs: Any) -> Employee:
        kwargs.setdefault("first_name", "Hannah")
        return await self.employee(department="People", role=ActorRole.ADMIN, **kwargs)

    async def policy(
        self,
        *,
        approval_level: ApprovalLevel = ApprovalLevel.MANAGER,
        leave_type: LeaveType = LeaveType.ANNUAL,
        max_days_per_request: Decimal = Decimal("30"),
        min_notice_days: int = 0,
        default_entitlement_days: Decimal = Decimal("20"),
        **overrides: Any,
    ) -> LeavePolicy:
        return await self._save(
            LeavePolicy(
                code=f"{leave_type.value}-{uuid.uuid4().hex[:8]}",
                name=f"{leave_type.value.title()} Leave",
                leave_type=leave_type,
                approval_level=approval_level,
                max_days_per_request=max_days_per_request,
                min_notice_days=min_notice_days,
                default_entitlement_days=default_entitlement_days,
                **overrides,
            )
        )

    async def balance(
        self,
        employee: Employee,
        policy: LeavePolicy,
        entitled: Decimal | int = 10,
        fiscal_year: int | None = None,
    ) -> LeaveBalance:
        entitled = Decimal(entitled)
        return await self._save(
            LeaveBalance(
                employee_id=employee.id,
                policy_id=policy.id,
                fiscal_year=fiscal_year if fiscal_year is not None else current_fiscal_year(),
                entitled_days=entitled,
                available_days=entitled,
            )
        )

    async def holiday(self, day: date, location: str | None = None, name: str = "Holiday") -> Holiday:
        return await self._save(Holiday(date=day, name=name, location=location, fiscal_year=fiscal_year_for(day)))

    # ----- Reads -----

    async def get_balance(self, employee_id: uuid.UUID, policy_id: uuid.UUID) -> LeaveBalance | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(LeaveBalance).where(
                    col(LeaveBalance.employee_id) == employee_id,
                    col(LeaveBalance.policy_id) == policy_id,
                    col(LeaveBalance.fiscal_year) == current_fiscal_year(),
                )
            )
            return result.scalar_one_or_none()

    async def get_request(self, request_id: uuid.UUID) -> LeaveRequest | None:
        async with self._session_factory() as session:
            return await session.get(LeaveRequest, request_id)

    async def count_requests(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(LeaveRequest))
            return len(result.scalars().all())

    async def audit_entries(self, request_id: uuid.UUID) -> list[LeaveAuditLog]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(LeaveAuditLog)
                .where(col(LeaveAuditLog.request_id) == request_id)
                .order_by(col(LeaveAuditLog.created_at))
            )
            return list(result.scalars().all())

    # ----- Callers -----

    @staticmethod
    def actor(employee: Employee) -> Actor:
        return Actor(
            id=employee.id,
            role=ActorRole(employee.role),
            department=employee.department,
            employee_id=employee.id,
        )

    @staticmethod
    def headers(employee: Employee) -> dict[str, str]:
        return {
            "X-User-Id": str(employee.id),
            "X-Role": str(employee.role),
            "X-Department": employee.department,
            "X-Employee-Id": str(employee.id),
        }

    # ----- Dates -----

    @staticmethod
    def workday(days_ahead: int) -> date:
        """First Monday-to-Friday date at least ``days_ahead`` days from today."""
        day = date.today() + timedelta(days=days_ahead)
        while day.weekday() >= 5:
            day += timedelta(days=1)
        return day

    @staticmethod
    def past_workday() -> date:
        """Most recent Monday-to-Friday date strictly before today."""
        day = date.today() - timedelta(days=1)
        while day.weekday() >= 5:
            day -= timedelta(days=1)
        return day

    @staticmethod
    def week_of(days_ahead: int) -> tuple[date, date]:
        """A Monday-to-Friday span starting on the first Monday ``days_ahead`` days out."""
        monday = date.today() + timedelta(days=days_ahead)
        while monday.weekday() != 0:
            monday += timedelta(days=1)
        return monday, monday + timedelta(days=4)


@pytest.fixture
def factory(session_factory: async_sessionmaker[AsyncSession]) -> Factory:
    return Factory(session_factory)
