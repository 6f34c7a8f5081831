"""Tests for request listing, lookups, the approval queue and audit trails."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import update
from sqlmodel import col

from leaveflow.exceptions import Forbidden, NotFound
from leaveflow.models.base import utc_now
from leaveflow.models.enums import ActorRole, ApprovalLevel, ApprovalStep, AuditAction, LeaveStatus, LeaveType
from leaveflow.models.request import LeaveRequest
from leaveflow.outcome import Failure, Success
from leaveflow.schemas.auth import Actor
from leaveflow.schemas.request import LeaveRequestFilter, SubmitLeavePayload
from leaveflow.services import request as request_service

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from leaveflow.models.employee import Employee
    from leaveflow.models.policy import LeavePolicy
    from tests.conftest import Factory


@dataclass
class Org:
    manager: Employee
    bob: Employee
    carol: Employee
    dave: Employee
    sales_manager: Employee
    hr: Employee
    annual: LeavePolicy
    sick: LeavePolicy


@pytest.fixture
async def org(factory: Factory) -> Org:
    return Org(
        manager=await factory.manager(first_name="Alice", last_name="Johnson"),
        bob=await factory.employee(first_name="Bob", last_name="Smith"),
        carol=await factory.employee(first_name="Carol", last_name="Williams"),
        dave=await factory.employee(first_name="Dave", last_name="Brown", department="Sales", location="Mumbai"),
        sales_manager=await factory.manager(department="Sales", first_name="Sam", last_name="Stone"),
        hr=await factory.hr(first_name="Erin", last_name="Davis"),
        annual=await factory.policy(leave_type=LeaveType.ANNUAL),
        sick=await factory.policy(leave_type=LeaveType.SICK, approval_level=ApprovalLevel.BOTH),
    )


async def _file(
    session: AsyncSession,
    factory: Factory,
    employee: Employee,
    policy: LeavePolicy,
    start: date,
    end: date | None = None,
    **kwargs: Any,
) -> uuid.UUID:
    outcome = await request_service.submit_request(
        session,
        factory.actor(employee),
        SubmitLeavePayload(
            employee_id=employee.id,
            policy_id=policy.id,
            start_date=start,
            end_date=end or start,
            **kwargs,
        ),
    )
    assert isinstance(outcome, Success), outcome
    return outcome.value.id


def _value(outcome: Success[Any] | Failure) -> Any:
    assert isinstance(outcome, Success), outcome
    return outcome.value


async def _backdate_application(
    session_factory: async_sessionmaker[AsyncSession],
    request_id: uuid.UUID,
    days: int,
) -> None:
    async with session_factory() as session:
        await session.execute(
            update(LeaveRequest)
            .where(col(LeaveRequest.id) == request_id)
            .values(applied_at=utc_now() - timedelta(days=days))
        )
        await session.commit()


@pytest.fixture
async def filed(db_session: AsyncSession, factory: Factory, org: Org) -> dict[str, uuid.UUID]:
    """Four requests across two departments in a known state."""
    monday, friday = factory.week_of(7)
    ids = {
        "bob_annual": await _file(
            db_session, factory, org.bob, org.annual, monday, monday + timedelta(days=2), reason="Family wedding"
        ),
        "carol_sick": await _file(db_session, factory, org.carol, org.sick, monday, is_emergency=True, reason="Flu"),
        "dave_annual": await _file(db_session, factory, org.dave, org.annual, monday, friday, reason="Beach"),
        "bob_rejected": await _file(db_session, factory, org.bob, org.annual, friday, reason="Long weekend"),
    }
    outcome = await request_service.reject_request(db_session, factory.actor(org.manager), ids["bob_rejected"])
    assert isinstance(outcome, Success)
    return ids


# ---------------------------------------------------------------------------
# list_requests
# ---------------------------------------------------------------------------


async def test_employee_sees_only_own_requests(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.bob)))

    assert listing.total == 2
    assert {item.id for item in listing.items} == {filed["bob_annual"], filed["bob_rejected"]}


async def test_employee_filter_cannot_widen_scope(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    filters = LeaveRequestFilter(employee_id=org.dave.id)
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.bob), filters))
    assert listing.total == 0


async def test_manager_sees_department(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.manager)))

    assert listing.total == 3
    assert all(item.employee.department == "Engineering" for item in listing.items)


async def test_manager_with_employee_filter(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    filters = LeaveRequestFilter(employee_id=org.dave.id)
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.manager), filters))

    assert [item.id for item in listing.items] == [filed["dave_annual"]]


async def test_admin_sees_everything(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr)))
    assert listing.total == 4


async def test_manager_without_department_sees_nothing(
    db_session: AsyncSession, filed: dict[str, uuid.UUID]
) -> None:
    actor = Actor(id=uuid.uuid4(), role=ActorRole.MANAGER)
    listing = _value(await request_service.list_requests(db_session, actor))
    assert listing.total == 0


@pytest.mark.parametrize(
    ("filters", "expected"),
    [
        (LeaveRequestFilter(status=LeaveStatus.REJECTED), {"bob_rejected"}),
        (LeaveRequestFilter(statuses=[LeaveStatus.PENDING]), {"bob_annual", "carol_sick", "dave_annual"}),
        (LeaveRequestFilter(leave_type=LeaveType.SICK), {"carol_sick"}),
        (LeaveRequestFilter(department="Sales"), {"dave_annual"}),
        (LeaveRequestFilter(is_emergency=True), {"carol_sick"}),
        (LeaveRequestFilter(min_days=Decimal("3")), {"bob_annual", "dave_annual"}),
        (LeaveRequestFilter(max_days=Decimal("1")), {"carol_sick", "bob_rejected"}),
        (LeaveRequestFilter(search="wedding"), {"bob_annual"}),
        (LeaveRequestFilter(search="smith", search_field="employee_name"), {"bob_annual", "bob_rejected"}),
        (LeaveRequestFilter(search="beach", search_field="employee_name"), set()),
        (LeaveRequestFilter(search="%"), set()),
        (LeaveRequestFilter(search="_", search_field="employee_email"), set()),
    ],
)
async def test_admin_filters(
    db_session: AsyncSession,
    factory: Factory,
    org: Org,
    filed: dict[str, uuid.UUID],
    filters: LeaveRequestFilter,
    expected: set[str],
) -> None:
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr), filters))
    assert {item.id for item in listing.items} == {filed[name] for name in expected}


async def test_search_matches_wildcards_literally(db_session: AsyncSession, factory: Factory, org: Org) -> None:
    literal = await _file(db_session, factory, org.bob, org.annual, factory.workday(10), reason="50% remote")
    await _file(db_session, factory, org.carol, org.annual, factory.workday(10), reason="500 errors")

    listing = _value(
        await request_service.list_requests(db_session, factory.actor(org.hr), LeaveRequestFilter(search="50%"))
    )

    assert [item.id for item in listing.items] == [literal]


async def test_date_range_filters(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    monday, friday = factory.week_of(7)
    filters = LeaveRequestFilter(start_from=friday)
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr), filters))
    assert [item.id for item in listing.items] == [filed["bob_rejected"]]

    filters = LeaveRequestFilter(end_to=monday)
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr), filters))
    assert [item.id for item in listing.items] == [filed["carol_sick"]]


async def test_sort_by_total_days(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    filters = LeaveRequestFilter(sort_by="total_days", sort_order="asc")
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr), filters))

    totals = [item.total_days for item in listing.items]
    assert totals == sorted(totals)
    assert listing.items[-1].id == filed["dave_annual"]


async def test_sort_by_employee_name(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    filters = LeaveRequestFilter(sort_by="employee_name", sort_order="asc")
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr), filters))

    assert [item.employee.name for item in listing.items] == [
        "Bob Smith",
        "Bob Smith",
        "Carol Williams",
        "Dave Brown",
    ]


async def test_sort_is_stable_across_pages(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    actor = factory.actor(org.hr)
    full = _value(
        await request_service.list_requests(db_session, actor, LeaveRequestFilter(sort_by="status", limit=10))
    )
    pages = []
    for offset in range(4):
        page = _value(
            await request_service.list_requests(
                db_session, actor, LeaveRequestFilter(sort_by="status", offset=offset, limit=1)
            )
        )
        assert page.total == 4
        pages.extend(item.id for item in page.items)

    assert pages == [item.id for item in full.items]


async def test_summary(db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]) -> None:
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.hr)))

    summary = listing.summary
    assert summary.total == 4
    assert summary.pending == 3
    assert summary.rejected == 1
    assert summary.approved == 0
    assert summary.cancelled == 0
    assert summary.average_days == Decimal("2.50")


async def test_summary_of_empty_listing(db_session: AsyncSession, factory: Factory, org: Org) -> None:
    listing = _value(await request_service.list_requests(db_session, factory.actor(org.bob)))

    assert listing.items == []
    assert listing.summary.total == 0
    assert listing.summary.average_days == Decimal("0.00")


# ---------------------------------------------------------------------------
# get_request and audit trail
# ---------------------------------------------------------------------------


async def test_get_request_visibility(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    request_id = filed["bob_annual"]

    assert _value(await request_service.get_request(db_session, factory.actor(org.bob), request_id)).id == request_id
    assert _value(await request_service.get_request(db_session, factory.actor(org.manager), request_id))
    assert _value(await request_service.get_request(db_session, factory.actor(org.hr), request_id))

    for outsider in (org.carol, org.sales_manager, org.dave):
        outcome = await request_service.get_request(db_session, factory.actor(outsider), request_id)
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, Forbidden)


async def test_get_unknown_request(db_session: AsyncSession, factory: Factory, org: Org) -> None:
    outcome = await request_service.get_request(db_session, factory.actor(org.hr), uuid.uuid4())
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error, NotFound)


async def test_audit_trail(db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]) -> None:
    trail = _value(await request_service.get_audit_trail(db_session, factory.actor(org.bob), filed["bob_rejected"]))

    assert trail.total == 2
    assert [entry.action for entry in trail.items] == [AuditAction.SUBMITTED, AuditAction.REJECTED]
    assert trail.items[1].actor_id == org.manager.id
    assert trail.items[1].approver_role == ApprovalStep.MANAGER


async def test_audit_trail_forbidden_for_other_employee(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    outcome = await request_service.get_audit_trail(db_session, factory.actor(org.carol), filed["bob_annual"])
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error, Forbidden)


# ---------------------------------------------------------------------------
# Approval queue
# ---------------------------------------------------------------------------


async def test_manager_queue(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    queue = _value(await request_service.get_approval_queue(db_session, factory.actor(org.manager)))

    assert {item.id for item in queue.items} == {filed["bob_annual"], filed["carol_sick"]}
    assert queue.total == 2
    assert queue.overdue == 0


async def test_queue_excludes_own_requests(db_session: AsyncSession, factory: Factory, org: Org) -> None:
    await _file(db_session, factory, org.manager, org.annual, factory.workday(10))
    queue = _value(await request_service.get_approval_queue(db_session, factory.actor(org.manager)))
    assert queue.total == 0


async def test_hr_queue_excludes_own_requests(db_session: AsyncSession, factory: Factory, org: Org) -> None:
    hr_only = await factory.policy(leave_type=LeaveType.UNPAID, approval_level=ApprovalLevel.HR)
    own = await _file(db_session, factory, org.hr, hr_only, factory.workday(10))
    other_admin = Actor(id=uuid.uuid4(), role=ActorRole.ADMIN, department="People", employee_id=uuid.uuid4())

    own_queue = _value(await request_service.get_approval_queue(db_session, factory.actor(org.hr)))
    other_queue = _value(await request_service.get_approval_queue(db_session, other_admin))

    assert own_queue.total == 0
    assert [item.id for item in other_queue.items] == [own]


async def test_both_request_moves_to_hr_queue(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    hr_queue = _value(await request_service.get_approval_queue(db_session, factory.actor(org.hr)))
    assert hr_queue.total == 0

    await request_service.approve_request(db_session, factory.actor(org.manager), filed["carol_sick"])

    hr_queue = _value(await request_service.get_approval_queue(db_session, factory.actor(org.hr)))
    manager_queue = _value(await request_service.get_approval_queue(db_session, factory.actor(org.manager)))
    assert [item.id for item in hr_queue.items] == [filed["carol_sick"]]
    assert filed["carol_sick"] not in {item.id for item in manager_queue.items}


async def test_queue_priority_filters(
    db_session: AsyncSession, factory: Factory, org: Org, filed: dict[str, uuid.UUID]
) -> None:
    actor = factory.actor(org.sales_manager)
    long = _value(await request_service.get_approval_queue(db_session, actor, priority="long"))
    assert [item.id for item in long.items] == [filed["dave_annual"]]

    actor = factory.actor(org.manager)
    emergency = _value(await request_service.get_approval_queue(db_session, actor, priority="emergency"))
    assert [item.id for item in emergency.items] == [filed["carol_sick"]]


async def test_queue_overdue(
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    factory: Factory,
    org: Org,
    filed: dict[str, uuid.UUID],
) -> None:
    await _backdate_application(session_factory, filed["bob_annual"], days=10)
    actor = factory.actor(org.manager)

    overdue = _value(await request_service.get_approval_queue(db_session, actor, status="overdue"))
    on_time = _value(await request_service.get_approval_queue(db_session, actor, status="pending"))
    everything = _value(await request_service.get_approval_queue(db_session, actor))

    assert [item.id for item in overdue.items] == [filed["bob_annual"]]
    assert overdue.items[0].is_overdue is True
    assert overdue.items[0].days_waiting >= 9
    assert overdue.items[0].expected_decision_date < date.today()
    assert [item.id for item in on_time.items] == [filed["carol_sick"]]
    assert everything.overdue == 1
    assert everything.items[0].id == filed["bob_annual"]


async def test_employee_has_no_queue(db_session: AsyncSession, factory: Factory, org: Org) -> None:
    outcome = await request_service.get_approval_queue(db_session, factory.actor(org.bob))
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error, Forbidden)
