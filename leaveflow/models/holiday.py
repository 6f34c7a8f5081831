# ruff: noqa: TC003
from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import UUIDBase


class Holiday(UUIDBase, table=True):
    """A public or company holiday; ``location`` of None applies everywhere."""

    __tablename__ = "holiday"
    __table_args__ = (sa.UniqueConstraint("date", "location", name="uq_holiday_date_location"),)

    date: datetime.date = Field(index=True)
    name: str = Field(max_length=255)
    location: str | None = Field(default=None, max_length=100)
    fiscal_year: int = Field(index=True)
