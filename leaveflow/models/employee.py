# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import TimestampMixin, UUIDBase
from leaveflow.models.enums import ActorRole


class Employee(UUIDBase, TimestampMixin, table=True):
    """Directory record of an employee, mirrored from the HR system of record."""

    __tablename__ = "employee"
    __table_args__ = (sa.Index("ix_employee_department_active", "department", "is_active"),)

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True)
    department: str = Field(max_length=100)
    location: str | None = Field(default=None, max_length=100)
    role: str = Field(default=ActorRole.EMPLOYEE, max_length=50, sa_column_kwargs={"server_default": "EMPLOYEE"})
    is_active: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    hire_date: date | None = None
    manager_id: uuid.UUID | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
