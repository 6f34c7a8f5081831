"""Tests for team coverage, conflict detection and employee availability."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

import pytest

from leaveflow.exceptions import Forbidden, NotFound, ValidationError
from leaveflow.models.enums import ConflictSeverity, ConflictType, LeaveStatus, LeaveType, RiskLevel
from leaveflow.outcome import Failure, Success
from leaveflow.schemas.request import SubmitLeavePayload
from leaveflow.services import coverage as coverage_service
from leaveflow.services import request as request_service

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.models.employee import Employee
    from leaveflow.models.policy import LeavePolicy
    from tests.conftest import Factory


@dataclass
class Support:
    manager: Employee
    members: list[Employee]
    hr: Employee
    policy: LeavePolicy
    monday: date
    sunday: date


async def _take_leave(
    session: AsyncSession,
    factory: Factory,
    team: Support,
    employee: Employee,
    start: date,
    end: date | None = None,
    *,
    approve: bool = True,
    **kwargs: Any,
) -> uuid.UUID:
    outcome = await request_service.submit_request(
        session,
        factory.actor(employee),
        SubmitLeavePayload(
            employee_id=employee.id,
            policy_id=team.policy.id,
            start_date=start,
            end_date=end or start,
            **kwargs,
        ),
    )
    assert isinstance(outcome, Success), outcome
    if approve:
        decision = await request_service.approve_request(session, factory.actor(team.manager), outcome.value.id)
        assert isinstance(decision, Success), decision
    return outcome.value.id


@pytest.fixture
async def support(db_session: AsyncSession, factory: Factory) -> Support:
    """A five-person department where three people are off on Wednesday.

    Monday: one absent. Tuesday: two absent. Wednesday: three absent.
    """
    manager = await factory.manager(department="Support", first_name="Mia")
    members = [
        await factory.employee(department="Support", first_name=name, last_name="Support")
        for name in ("Ann", "Ben", "Cat", "Dan")
    ]
    await factory.employee(department="Engineering", first_name="Other")
    hr = await factory.hr()
    policy = await factory.policy()
    monday, _ = factory.week_of(7)
    team = Support(
        manager=manager,
        members=members,
        hr=hr,
        policy=policy,
        monday=monday,
        sunday=monday + timedelta(days=6),
    )

    await _take_leave(db_session, factory, team, members[0], monday, monday + timedelta(days=2))
    await _take_leave(db_session, factory, team, members[1], monday + timedelta(days=1), monday + timedelta(days=2))
    await _take_leave(db_session, factory, team, members[2], monday + timedelta(days=2))
    return team


def _value(outcome: Success[Any] | Failure) -> Any:
    assert isinstance(outcome, Success), outcome
    return outcome.value


def _error(outcome: Success[Any] | Failure) -> Exception:
    assert isinstance(outcome, Failure), outcome
    return outcome.error


# ---------------------------------------------------------------------------
# analyze_coverage
# ---------------------------------------------------------------------------


async def test_coverage_per_day(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    report = _value(
        await coverage_service.analyze_coverage(
            db_session, factory.actor(support.manager), support.monday, support.sunday
        )
    )

    assert report.department == "Support"
    assert report.team_size == 5
    assert len(report.days) == 7

    monday, tuesday, wednesday = report.days[:3]
    assert (monday.on_leave, monday.available, monday.risk_level) == (1, 4, RiskLevel.LOW)
    assert (tuesday.on_leave, tuesday.coverage_percentage, tuesday.risk_level) == (2, 60.0, RiskLevel.MEDIUM)
    assert wednesday.available == 2
    assert wednesday.coverage_percentage == 40.0
    assert wednesday.risk_level == RiskLevel.HIGH
    assert all(day.coverage_percentage == 100.0 for day in report.days[3:])
    assert [day.is_working_day for day in report.days] == [True] * 5 + [False] * 2

    assert report.summary.high_risk_days == 1
    assert report.summary.medium_risk_days == 1
    assert report.summary.total_days == 7


async def test_coverage_counts_pending_requests(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    thursday = support.monday + timedelta(days=3)
    await _take_leave(db_session, factory, support, support.members[3], thursday, approve=False)

    report = _value(
        await coverage_service.analyze_coverage(db_session, factory.actor(support.hr), thursday, thursday, "Support")
    )

    assert report.days[0].on_leave == 1


async def test_coverage_ignores_cancelled_requests(
    db_session: AsyncSession, factory: Factory, support: Support
) -> None:
    thursday = support.monday + timedelta(days=3)
    request_id = await _take_leave(db_session, factory, support, support.members[3], thursday, approve=False)
    await request_service.cancel_request(db_session, factory.actor(support.members[3]), request_id)

    report = _value(
        await coverage_service.analyze_coverage(db_session, factory.actor(support.hr), thursday, thursday, "Support")
    )

    assert report.days[0].on_leave == 0


async def test_coverage_marks_holidays(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    friday = support.monday + timedelta(days=4)
    await factory.holiday(friday, name="Company Day")

    report = _value(
        await coverage_service.analyze_coverage(db_session, factory.actor(support.manager), friday, friday)
    )

    assert report.days[0].is_working_day is False


async def test_admin_coverage_of_whole_company(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    report = _value(
        await coverage_service.analyze_coverage(db_session, factory.actor(support.hr), support.monday, support.monday)
    )

    assert report.department is None
    assert report.team_size == 7


async def test_empty_department_is_fully_covered(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    report = _value(
        await coverage_service.analyze_coverage(
            db_session, factory.actor(support.hr), support.monday, support.monday, "Nobody"
        )
    )

    assert report.team_size == 0
    assert report.days[0].coverage_percentage == 100.0
    assert report.days[0].risk_level == RiskLevel.LOW


async def test_coverage_forbidden_for_employees(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    outcome = await coverage_service.analyze_coverage(
        db_session, factory.actor(support.members[3]), support.monday, support.sunday
    )
    assert isinstance(_error(outcome), Forbidden)


async def test_manager_cannot_analyse_other_department(
    db_session: AsyncSession, factory: Factory, support: Support
) -> None:
    outcome = await coverage_service.analyze_coverage(
        db_session, factory.actor(support.manager), support.monday, support.sunday, "Engineering"
    )
    assert isinstance(_error(outcome), Forbidden)


@pytest.mark.parametrize(("offset_start", "offset_end"), [(3, 1), (0, 400)])
async def test_coverage_rejects_bad_ranges(
    db_session: AsyncSession,
    factory: Factory,
    support: Support,
    offset_start: int,
    offset_end: int,
) -> None:
    outcome = await coverage_service.analyze_coverage(
        db_session,
        factory.actor(support.hr),
        support.monday + timedelta(days=offset_start),
        support.monday + timedelta(days=offset_end),
    )
    assert isinstance(_error(outcome), ValidationError)


# ---------------------------------------------------------------------------
# detect_conflicts
# ---------------------------------------------------------------------------


async def test_understaffing_below_minimum(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    report = _value(
        await coverage_service.detect_conflicts(
            db_session, factory.actor(support.manager), support.monday, support.sunday, min_team_size=3
        )
    )

    [conflict] = report.conflicts
    assert conflict.date == support.monday + timedelta(days=2)
    assert conflict.conflict_type == ConflictType.UNDERSTAFFING
    assert conflict.severity == ConflictSeverity.MEDIUM
    assert conflict.available == 2
    assert len(conflict.affected_employees) == 3
    assert conflict.recommendations[0] == "Consider staggering leave dates or arranging additional coverage"
    assert report.summary.total == 1
    assert report.summary.medium == 1


async def test_understaffing_severity_scales(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    report = _value(
        await coverage_service.detect_conflicts(
            db_session, factory.actor(support.manager), support.monday, support.sunday, min_team_size=5
        )
    )

    severities = [(c.date.weekday(), c.severity) for c in report.conflicts]
    assert severities == [
        (0, ConflictSeverity.MEDIUM),
        (1, ConflictSeverity.MEDIUM),
        (2, ConflictSeverity.HIGH),
    ]
    assert report.summary.high == 1


async def test_nobody_left_is_critical(db_session: AsyncSession, factory: Factory) -> None:
    manager = await factory.manager(department="Tiny")
    member = await factory.employee(department="Tiny")
    policy = await factory.policy()
    monday, _ = factory.week_of(7)
    hr = await factory.hr()
    team = Support(manager=manager, members=[member], hr=hr, policy=policy, monday=monday, sunday=monday)
    await _take_leave(db_session, factory, team, member, monday)
    await _take_leave(db_session, factory, team, manager, monday, approve=False)

    report = _value(
        await coverage_service.detect_conflicts(db_session, factory.actor(hr), monday, monday, "Tiny")
    )

    [conflict] = [c for c in report.conflicts if c.conflict_type == ConflictType.UNDERSTAFFING]
    assert conflict.severity == ConflictSeverity.CRITICAL
    assert conflict.available == 0
    assert conflict.recommendations[0] == "Consider rejecting some leave requests or finding temporary coverage"


async def test_priority_overlap(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    friday = support.monday + timedelta(days=4)
    await _take_leave(db_session, factory, support, support.members[3], friday, is_emergency=True, approve=False)
    await _take_leave(db_session, factory, support, support.manager, friday, approve=False)

    report = _value(
        await coverage_service.detect_conflicts(db_session, factory.actor(support.hr), friday, friday, "Support")
    )

    [conflict] = report.conflicts
    assert conflict.conflict_type == ConflictType.PRIORITY_OVERLAP
    assert conflict.severity == ConflictSeverity.HIGH
    assert {a.employee_id for a in conflict.affected_employees} == {support.manager.id, support.members[3].id}


async def test_conflicts_filtered_by_leave_type(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    report = _value(
        await coverage_service.detect_conflicts(
            db_session,
            factory.actor(support.hr),
            support.monday,
            support.sunday,
            "Support",
            min_team_size=3,
            leave_type=LeaveType.SICK,
        )
    )
    assert report.conflicts == []


async def test_conflicts_reject_zero_minimum(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    outcome = await coverage_service.detect_conflicts(
        db_session, factory.actor(support.hr), support.monday, support.sunday, min_team_size=0
    )
    assert isinstance(_error(outcome), ValidationError)


# ---------------------------------------------------------------------------
# get_employee_availability
# ---------------------------------------------------------------------------


async def test_availability(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    friday = support.monday + timedelta(days=4)
    ann, _, _, dan = support.members
    await _take_leave(db_session, factory, support, dan, friday, is_half_day=True, half_day_session="FIRST_HALF")

    report = _value(
        await coverage_service.get_employee_availability(
            db_session, factory.actor(support.manager), [ann.id, dan.id], support.monday, friday
        )
    )

    ann_report, dan_report = report.employees
    assert ann_report.employee_id == ann.id
    assert ann_report.available_days == 2
    assert ann_report.unavailable_days == 3
    assert ann_report.availability_percentage == 40.0
    assert ann_report.days[0].leave_status == LeaveStatus.APPROVED
    assert ann_report.days[0].leave_type == LeaveType.ANNUAL

    assert dan_report.availability_percentage == 80.0
    assert dan_report.days[-1].is_available is False
    assert dan_report.days[-1].is_half_day is True

    assert report.summary.total_employees == 2
    assert report.summary.partially_available == 2
    assert report.summary.average_availability == 60.0


async def test_employee_sees_own_availability_only(
    db_session: AsyncSession, factory: Factory, support: Support
) -> None:
    ann, ben, _, _ = support.members
    own = await coverage_service.get_employee_availability(
        db_session, factory.actor(ann), [ann.id], support.monday, support.sunday
    )
    other = await coverage_service.get_employee_availability(
        db_session, factory.actor(ann), [ann.id, ben.id], support.monday, support.sunday
    )

    assert _value(own).summary.total_employees == 1
    assert isinstance(_error(other), Forbidden)


async def test_availability_unknown_employee(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    outcome = await coverage_service.get_employee_availability(
        db_session, factory.actor(support.hr), [uuid.uuid4()], support.monday, support.sunday
    )
    assert isinstance(_error(outcome), NotFound)


async def test_availability_requires_employees(db_session: AsyncSession, factory: Factory, support: Support) -> None:
    outcome = await coverage_service.get_employee_availability(
        db_session, factory.actor(support.hr), [], support.monday, support.sunday
    )
    assert isinstance(_error(outcome), ValidationError)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


async def test_coverage_endpoint(async_client: AsyncClient, factory: Factory, support: Support) -> None:
    response = await async_client.get(
        "/coverage",
        params={"start_date": str(support.monday), "end_date": str(support.sunday)},
        headers=factory.headers(support.manager),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["team_size"] == 5
    assert data["days"][2]["risk_level"] == "HIGH"


async def test_conflicts_endpoint_forbidden_for_employee(
    async_client: AsyncClient, factory: Factory, support: Support
) -> None:
    response = await async_client.get(
        "/coverage/conflicts",
        params={"start_date": str(support.monday), "end_date": str(support.sunday)},
        headers=factory.headers(support.members[0]),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


async def test_availability_endpoint(async_client: AsyncClient, factory: Factory, support: Support) -> None:
    ann, ben, _, _ = support.members
    response = await async_client.get(
        "/coverage/availability",
        params=[
            ("employee_id", str(ann.id)),
            ("employee_id", str(ben.id)),
            ("start_date", str(support.monday)),
            ("end_date", str(support.sunday)),
        ],
        headers=factory.headers(support.hr),
    )

    assert response.status_code == 200
    assert [e["employee_id"] for e in response.json()["employees"]] == [str(ann.id), str(ben.id)]
