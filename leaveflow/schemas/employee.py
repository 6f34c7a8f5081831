# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class EmployeeSummary(BaseModel):
    """Employee fields embedded in leave responses."""

    id: uuid.UUID
    name: str
    email: str
    department: str
    location: str | None
