"""HTTP tests for the read-only policy and holiday endpoints."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from leaveflow.models.enums import LeaveType

if TYPE_CHECKING:
    from httpx import AsyncClient

    from tests.conftest import Factory


async def test_list_policies(async_client: AsyncClient, factory: Factory) -> None:
    employee = await factory.employee()
    await factory.policy(leave_type=LeaveType.ANNUAL)
    await factory.policy(leave_type=LeaveType.SICK)
    await factory.policy(leave_type=LeaveType.CASUAL, is_active=False)

    response = await async_client.get("/policies", headers=factory.headers(employee))
    assert response.status_code == 200
    assert response.json()["total"] == 2

    response = await async_client.get(
        "/policies", params={"active_only": "false"}, headers=factory.headers(employee)
    )
    assert response.json()["total"] == 3

    response = await async_client.get("/policies", params={"leave_type": "SICK"}, headers=factory.headers(employee))
    assert [p["leave_type"] for p in response.json()["items"]] == ["SICK"]


async def test_list_policies_by_scope(async_client: AsyncClient, factory: Factory) -> None:
    employee = await factory.employee()
    await factory.policy()
    await factory.policy(applicable_departments=["Sales"])
    await factory.policy(applicable_locations=["Mumbai"])

    response = await async_client.get(
        "/policies", params={"department": "Engineering"}, headers=factory.headers(employee)
    )
    assert response.json()["total"] == 2

    response = await async_client.get(
        "/policies",
        params={"department": "Engineering", "location": "Bengaluru"},
        headers=factory.headers(employee),
    )
    assert response.json()["total"] == 1


async def test_get_policy(async_client: AsyncClient, factory: Factory) -> None:
    employee = await factory.employee()
    policy = await factory.policy(min_notice_days=7)

    response = await async_client.get(f"/policies/{policy.id}", headers=factory.headers(employee))
    assert response.status_code == 200
    assert response.json()["min_notice_days"] == 7

    response = await async_client.get(f"/policies/{uuid.uuid4()}", headers=factory.headers(employee))
    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


async def test_list_holidays(async_client: AsyncClient, factory: Factory) -> None:
    employee = await factory.employee()
    await factory.holiday(date(2026, 8, 15), name="Independence Day")
    await factory.holiday(date(2026, 9, 19), location="Mumbai", name="Ganesh Chaturthi")
    await factory.holiday(date(2026, 11, 1), location="Bengaluru", name="Rajyotsava")

    response = await async_client.get("/holidays", headers=factory.headers(employee))
    assert response.status_code == 200
    assert response.json()["total"] == 3

    response = await async_client.get("/holidays", params={"location": "Mumbai"}, headers=factory.headers(employee))
    assert [h["name"] for h in response.json()["items"]] == ["Independence Day", "Ganesh Chaturthi"]

    response = await async_client.get(
        "/holidays",
        params={"start_date": "2026-09-01", "end_date": "2026-12-31"},
        headers=factory.headers(employee),
    )
    assert response.json()["total"] == 2
