# ruff: noqa: TC003
from __future__ import annotations

import uuid
from collections.abc import Collection
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import select
from sqlmodel import col

from leaveflow.models.employee import Employee
from leaveflow.models.enums import ActorRole
from leaveflow.schemas.employee import EmployeeSummary

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.schemas.auth import Actor


@runtime_checkable
class EmployeeDirectory(Protocol):
    """Read-only view of the employee directory."""

    async def get_employee(self, employee_id: uuid.UUID) -> Employee | None:
        """Fetch one employee. Returns None if not found."""
        ...

    async def get_employees(self, employee_ids: Collection[uuid.UUID]) -> dict[uuid.UUID, Employee]:
        """Fetch several employees keyed by id; unknown ids are omitted."""
        ...

    async def list_active(self, department: str | None = None) -> list[Employee]:
        """List active employees, optionally restricted to one department."""
        ...


class SqlEmployeeDirectory:
    """Directory backed by the ``employee`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_employee(self, employee_id: uuid.UUID) -> Employee | None:
        result = await self._session.execute(select(Employee).where(col(Employee.id) == employee_id))
        return result.scalar_one_or_none()

    async def get_employees(self, employee_ids: Collection[uuid.UUID]) -> dict[uuid.UUID, Employee]:
        if not employee_ids:
            return {}
        result = await self._session.execute(select(Employee).where(col(Employee.id).in_(list(employee_ids))))
        return {employee.id: employee for employee in result.scalars().all()}

    async def list_active(self, department: str | None = None) -> list[Employee]:
        query = select(Employee).where(col(Employee.is_active).is_(True))
        if department is not None:
            query = query.where(col(Employee.department) == department)
        result = await self._session.execute(query.order_by(col(Employee.last_name), col(Employee.first_name)))
        return list(result.scalars().all())


def get_employee_directory(session: AsyncSession) -> EmployeeDirectory:
    """Return the directory bound to ``session``."""
    return SqlEmployeeDirectory(session)


def build_employee_summary(employee: Employee) -> EmployeeSummary:
    return EmployeeSummary(
        id=employee.id,
        name=employee.full_name,
        email=employee.email,
        department=employee.department,
        location=employee.location,
    )


def can_view_employee(actor: Actor, employee: Employee) -> bool:
    """Admins see everyone, managers their department, employees themselves."""
    if actor.is_admin or actor.owns(employee.id):
        return True
    return actor.role == ActorRole.MANAGER and actor.department is not None and actor.department == employee.department
