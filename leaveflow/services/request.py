# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

from sqlalchemy import ColumnElement, case, false, func, or_, select, update
from sqlmodel import col

from leaveflow.config import get_settings
from leaveflow.exceptions import (
    ConcurrencyConflict,
    Forbidden,
    InvalidStateTransition,
    NotFound,
    PolicyViolation,
    ValidationError,
)
from leaveflow.models.base import ensure_utc, utc_now
from leaveflow.models.employee import Employee
from leaveflow.models.enums import (
    ActorRole,
    ApprovalLevel,
    ApprovalStep,
    AuditAction,
    DecisionStatus,
    HalfDaySession,
    LeaveStatus,
    LeaveType,
)
from leaveflow.models.request import LeaveRequest
from leaveflow.schemas.request import (
    ApprovalQueueItem,
    ApprovalQueueResponse,
    CancelPayload,
    DecisionPayload,
    LeaveRequestFilter,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    RequestSummary,
)
from leaveflow.services import balance as ledger
from leaveflow.services.approval import approver_step_for, expected_decision_date, next_required_approver
from leaveflow.services.audit import list_entries, record_transition
from leaveflow.services.coverage import assess_team_impact
from leaveflow.services.duration import calculate_leave_days
from leaveflow.services.employee import build_employee_summary, can_view_employee, get_employee_directory
from leaveflow.services.fiscal import current_fiscal_year
from leaveflow.services.policy import find_policy, meets_tenure, policy_applies_to
from leaveflow.services.transaction import run_mutation, run_query

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.outcome import Failure, Success
    from leaveflow.schemas.audit import AuditTrailResponse
    from leaveflow.schemas.auth import Actor, RequestMeta
    from leaveflow.schemas.request import SubmitLeavePayload

logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = [LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value]
_TWO_PLACES = Decimal("0.01")

QueueStatus = Literal["pending", "overdue", "all"]
QueuePriority = Literal["all", "emergency", "long"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: LeaveRequest, employee: Employee | None = None) -> LeaveRequestResponse:
    """Map a request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        policy_id=request.policy_id,
        leave_type=LeaveType(request.leave_type),
        approval_level=ApprovalLevel(request.approval_level),
        fiscal_year=request.fiscal_year,
        start_date=request.start_date,
        end_date=request.end_date,
        total_days=request.total_days,
        is_half_day=request.is_half_day,
        half_day_session=HalfDaySession(request.half_day_session) if request.half_day_session else None,
        is_backdated=request.is_backdated,
        is_emergency=request.is_emergency,
        reason=request.reason,
        status=LeaveStatus(request.status),
        next_approver=next_required_approver(request.approval_level, request),
        applied_at=request.applied_at,
        manager_approved_by=request.manager_approved_by,
        manager_approval_status=(
            DecisionStatus(request.manager_approval_status) if request.manager_approval_status else None
        ),
        manager_decided_at=request.manager_decided_at,
        manager_comments=request.manager_comments,
        hr_approved_by=request.hr_approved_by,
        hr_approval_status=DecisionStatus(request.hr_approval_status) if request.hr_approval_status else None,
        hr_decided_at=request.hr_decided_at,
        hr_comments=request.hr_comments,
        final_approved_at=request.final_approved_at,
        rejected_by=request.rejected_by,
        rejected_at=request.rejected_at,
        rejection_reason=request.rejection_reason,
        cancelled_by=request.cancelled_by,
        cancelled_at=request.cancelled_at,
        cancellation_reason=request.cancellation_reason,
        employee=build_employee_summary(employee) if employee is not None else None,
    )


async def _get_request_for_update(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch and lock a request. Raises NotFound if it does not exist."""
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.id) == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFound("Leave request not found")
    return request


async def _get_request_with_employee(
    session: AsyncSession,
    request_id: uuid.UUID,
) -> tuple[LeaveRequest, Employee]:
    result = await session.execute(
        select(LeaveRequest, Employee)
        .join(Employee, col(Employee.id) == col(LeaveRequest.employee_id))
        .where(col(LeaveRequest.id) == request_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFound("Leave request not found")
    return row[0], row[1]


async def _claim(session: AsyncSession, request: LeaveRequest) -> None:
    """Bump the request version, failing if another transaction already did."""
    result = await session.execute(
        update(LeaveRequest)
        .where(col(LeaveRequest.id) == request.id, col(LeaveRequest.version) == request.version)
        .values(version=request.version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:  # ty: ignore[unresolved-attribute]
        raise ConcurrencyConflict("Leave request was modified concurrently; retry")
    await session.refresh(request)


async def _check_request_overlap(
    session: AsyncSession,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> None:
    """Raise PolicyViolation if a pending or approved request overlaps the range.

    Both ranges are inclusive, so they overlap when
    existing.start_date <= new.end_date AND existing.end_date >= new.start_date.
    """
    result = await session.execute(
        select(col(LeaveRequest.id))
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status).in_(_ACTIVE_STATUSES),
            col(LeaveRequest.start_date) <= end_date,
            col(LeaveRequest.end_date) >= start_date,
        )
        .limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise PolicyViolation("Request overlaps with an existing pending or approved request")


def _effective_approval_level(policy_level: str, escalation_threshold: Decimal | None, total_days: Decimal) -> str:
    """Long requests escalate to BOTH when the policy sets a threshold."""
    if escalation_threshold is not None and total_days >= escalation_threshold:
        return ApprovalLevel.BOTH.value
    return policy_level


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


async def _submit(
    session: AsyncSession,
    actor: Actor,
    payload: SubmitLeavePayload,
    meta: RequestMeta | None = None,
) -> LeaveRequestResponse:
    """Submit a new leave request.

    Flow:
    1. Actor may file for the employee
    2. Date range within the booking horizon
    3. Employee exists and is active
    4. Policy exists, is active, applies to the employee and their tenure
    5. Half-day and notice rules
    6. Compute business days and check the per-request maximum
    7. Lock the balance, check overlaps, reserve the days
    8. Assess the impact on the employee's team
    9. Insert PENDING request and audit entry carrying the team impact
    """
    settings = get_settings()
    today = date.today()

    # 1. Authorization.
    if not actor.is_admin and not actor.owns(payload.employee_id):
        raise Forbidden("Employees may only file leave for themselves")

    # 2. Dates.
    if payload.end_date < payload.start_date:
        raise ValidationError("end_date must not be before start_date")
    if payload.is_half_day and payload.start_date != payload.end_date:
        raise ValidationError("A half-day request must start and end on the same date")
    horizon = timedelta(days=settings.max_request_horizon_days)
    if payload.start_date < today - horizon or payload.end_date > today + horizon:
        raise ValidationError(f"Leave dates must be within {settings.max_request_horizon_days} days of today")

    # 3. Employee.
    employee = await get_employee_directory(session).get_employee(payload.employee_id)
    if employee is None:
        raise NotFound("Employee not found")
    if not employee.is_active:
        raise ValidationError("Employee is not active")

    # 4. Policy.
    policy = await find_policy(session, payload.policy_id)
    if policy is None or not policy.is_active:
        raise ValidationError("Unknown or inactive leave policy")
    if not policy_applies_to(policy, employee):
        raise PolicyViolation("Leave policy does not apply to this employee's department or location")
    if not meets_tenure(policy, employee, today):
        raise PolicyViolation(
            f"At least {policy.min_tenure_months} months of employment are required for {policy.leave_type} leave"
        )

    # 5. Half-day and notice.
    if payload.is_half_day and not policy.half_day_allowed:
        raise PolicyViolation("Half-day leave is not allowed under this policy")
    notice_days = (payload.start_date - today).days
    if not payload.is_emergency and notice_days < policy.min_notice_days:
        raise PolicyViolation(f"This policy requires at least {policy.min_notice_days} days notice")

    # 6. Duration.
    total_days = await calculate_leave_days(
        session,
        policy,
        employee.location,
        payload.start_date,
        payload.end_date,
        is_half_day=payload.is_half_day,
    )
    if total_days <= 0:
        raise ValidationError("Request covers no working days after excluding weekends and holidays")
    if total_days > policy.max_days_per_request:
        raise PolicyViolation(
            f"Request of {total_days} days exceeds the policy maximum of {policy.max_days_per_request} days"
        )

    # 7. Overlap and reservation, serialized on the balance row.
    fiscal_year = current_fiscal_year()
    balance = await ledger.lock_balance(session, employee.id, policy, fiscal_year)
    await _check_request_overlap(session, employee.id, payload.start_date, payload.end_date)
    await ledger.reserve(session, balance, total_days)

    # 8. Team impact, advisory only.
    team_impact = await assess_team_impact(session, employee, payload.start_date, payload.end_date)

    # 9. Persist.
    request = LeaveRequest(
        employee_id=employee.id,
        policy_id=policy.id,
        leave_type=policy.leave_type,
        approval_level=_effective_approval_level(
            policy.approval_level, policy.escalation_threshold_days, total_days
        ),
        fiscal_year=fiscal_year,
        start_date=payload.start_date,
        end_date=payload.end_date,
        total_days=total_days,
        is_half_day=payload.is_half_day,
        half_day_session=payload.half_day_session.value if payload.is_half_day and payload.half_day_session else None,
        is_backdated=payload.start_date < today,
        is_emergency=payload.is_emergency,
        reason=payload.reason,
        status=LeaveStatus.PENDING.value,
        ip_address=meta.ip_address if meta else None,
        user_agent=meta.user_agent if meta else None,
    )
    session.add(request)
    await session.flush()

    await record_transition(
        session,
        request,
        actor,
        AuditAction.SUBMITTED,
        previous_status=None,
        comments=payload.reason,
        meta=meta,
        details={"team_impact": team_impact.value},
    )

    logger.info(
        "Leave request %s submitted for employee %s: %s days (%s), team impact %s",
        request.id,
        employee.id,
        total_days,
        request.approval_level,
        team_impact.value,
    )
    return _build_request_response(request, employee)


async def _decide(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
    decision: DecisionStatus,
    payload: DecisionPayload | None = None,
    meta: RequestMeta | None = None,
) -> LeaveRequestResponse:
    """Record an approver's decision on a pending request.

    Flow:
    1. Lock the request; it must be PENDING
    2. The actor's approver role must not have decided already
    3. The actor's approver role must be the next required step
    4. Managers decide only for their department; nobody decides their own request
    5. Record the decision; terminal outcomes settle the ledger
    6. Audit entry tagged with the approver role
    """
    comments = payload.comments if payload else None

    # 1. Lock and state check.
    request = await _get_request_for_update(session, request_id)
    if request.status != LeaveStatus.PENDING:
        raise InvalidStateTransition(f"Cannot decide a request in status {request.status}")

    # 2. Repeat decisions.
    step = approver_step_for(actor.role)
    if step == ApprovalStep.MANAGER and request.manager_approval_status is not None:
        raise InvalidStateTransition("Manager has already decided this request")
    if step == ApprovalStep.HR and request.hr_approval_status is not None:
        raise InvalidStateTransition("HR has already decided this request")

    # 3. Routing.
    required = next_required_approver(request.approval_level, request)
    if step is None or step != required:
        raise Forbidden(f"This request is waiting on {required.value} approval")

    # 4. Scope.
    employee = await get_employee_directory(session).get_employee(request.employee_id)
    if actor.owns(request.employee_id):
        raise Forbidden("Approvers cannot decide their own leave requests")
    if step == ApprovalStep.MANAGER and (employee is None or actor.department != employee.department):
        raise Forbidden("Managers may only decide requests from their own department")

    # 5. Decision.
    await _claim(session, request)
    previous_status = LeaveStatus(request.status)
    now = utc_now()

    if step == ApprovalStep.MANAGER:
        request.manager_approved_by = actor.id
        request.manager_approval_status = decision.value
        request.manager_decided_at = now
        request.manager_comments = comments
    else:
        request.hr_approved_by = actor.id
        request.hr_approval_status = decision.value
        request.hr_decided_at = now
        request.hr_comments = comments

    if decision == DecisionStatus.REJECTED:
        balance = await ledger.lock_existing_balance(
            session, request.employee_id, request.policy_id, request.fiscal_year
        )
        await ledger.release(session, balance, request.total_days)
        request.status = LeaveStatus.REJECTED.value
        request.rejected_by = actor.id
        request.rejected_at = now
        request.rejection_reason = comments
        action = AuditAction.REJECTED
    else:
        if next_required_approver(request.approval_level, request) == ApprovalStep.NONE:
            balance = await ledger.lock_existing_balance(
                session, request.employee_id, request.policy_id, request.fiscal_year
            )
            await ledger.commit(session, balance, request.total_days)
            request.status = LeaveStatus.APPROVED.value
            request.final_approved_at = now
        action = AuditAction.APPROVED

    session.add(request)
    await session.flush()

    # 6. Audit.
    await record_transition(
        session,
        request,
        actor,
        action,
        previous_status=previous_status,
        approver_role=step,
        comments=comments,
        meta=meta,
    )

    logger.info(
        "Leave request %s %s by %s %s; status %s",
        request.id,
        decision.value.lower(),
        step.value,
        actor.id,
        request.status,
    )
    return _build_request_response(request, employee)


async def _cancel(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
    payload: CancelPayload | None = None,
    meta: RequestMeta | None = None,
) -> LeaveRequestResponse:
    """Cancel a pending request, or an approved one before it starts."""
    reason = payload.reason if payload else None
    today = date.today()

    request = await _get_request_for_update(session, request_id)
    if not actor.is_admin and not actor.owns(request.employee_id):
        raise Forbidden("Only the requester or an admin can cancel a leave request")

    previous_status = LeaveStatus(request.status)
    if previous_status == LeaveStatus.APPROVED and today >= request.start_date:
        raise InvalidStateTransition("Approved leave can only be cancelled before its start date")
    if previous_status not in (LeaveStatus.PENDING, LeaveStatus.APPROVED):
        raise InvalidStateTransition(f"Cannot cancel a request in status {request.status}")

    await _claim(session, request)
    balance = await ledger.lock_existing_balance(session, request.employee_id, request.policy_id, request.fiscal_year)
    if previous_status == LeaveStatus.PENDING:
        await ledger.release(session, balance, request.total_days)
    else:
        await ledger.restore(session, balance, request.total_days)

    request.status = LeaveStatus.CANCELLED.value
    request.cancelled_by = actor.id
    request.cancelled_at = utc_now()
    request.cancellation_reason = reason
    session.add(request)
    await session.flush()

    await record_transition(
        session,
        request,
        actor,
        AuditAction.CANCELLED,
        previous_status=previous_status,
        comments=reason,
        meta=meta,
    )

    employee = await get_employee_directory(session).get_employee(request.employee_id)
    logger.info("Leave request %s cancelled by %s (was %s)", request.id, actor.id, previous_status.value)
    return _build_request_response(request, employee)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def _employee_name_expr() -> ColumnElement[str]:
    return col(Employee.first_name) + " " + col(Employee.last_name)


def _scope_conditions(actor: Actor, filters: LeaveRequestFilter) -> list[ColumnElement[bool]]:
    """Restrict what each role may see."""
    if actor.role == ActorRole.EMPLOYEE:
        if actor.employee_id is None:
            return [false()]
        return [col(LeaveRequest.employee_id) == actor.employee_id]
    if actor.role == ActorRole.MANAGER and filters.employee_id is None:
        if actor.department is None:
            return [false()]
        return [col(Employee.department) == actor.department]
    return []


def _like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in the term matched literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _search_condition(term: str, field: str) -> ColumnElement[bool]:
    pattern = _like_pattern(term)

    def matches(column: ColumnElement[str]) -> ColumnElement[bool]:
        return column.ilike(pattern, escape="\\")

    by_field: dict[str, ColumnElement[bool]] = {
        "reason": matches(col(LeaveRequest.reason)),
        "employee_name": matches(_employee_name_expr()),
        "employee_email": matches(col(Employee.email)),
        "comments": or_(
            matches(col(LeaveRequest.manager_comments)),
            matches(col(LeaveRequest.hr_comments)),
            matches(col(LeaveRequest.rejection_reason)),
            matches(col(LeaveRequest.cancellation_reason)),
        ),
    }
    if field == "all":
        return or_(*by_field.values())
    return by_field[field]


def _filter_conditions(filters: LeaveRequestFilter) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if filters.status is not None:
        conditions.append(col(LeaveRequest.status) == filters.status.value)
    if filters.statuses:
        conditions.append(col(LeaveRequest.status).in_([s.value for s in filters.statuses]))
    if filters.leave_type is not None:
        conditions.append(col(LeaveRequest.leave_type) == filters.leave_type.value)
    if filters.employee_id is not None:
        conditions.append(col(LeaveRequest.employee_id) == filters.employee_id)
    if filters.department is not None:
        conditions.append(col(Employee.department) == filters.department)
    if filters.start_from is not None:
        conditions.append(col(LeaveRequest.start_date) >= filters.start_from)
    if filters.end_to is not None:
        conditions.append(col(LeaveRequest.end_date) <= filters.end_to)
    if filters.applied_from is not None:
        conditions.append(col(LeaveRequest.applied_at) >= filters.applied_from)
    if filters.applied_to is not None:
        conditions.append(col(LeaveRequest.applied_at) <= filters.applied_to)
    if filters.is_emergency is not None:
        conditions.append(col(LeaveRequest.is_emergency).is_(filters.is_emergency))
    if filters.is_backdated is not None:
        conditions.append(col(LeaveRequest.is_backdated).is_(filters.is_backdated))
    if filters.min_days is not None:
        conditions.append(col(LeaveRequest.total_days) >= filters.min_days)
    if filters.max_days is not None:
        conditions.append(col(LeaveRequest.total_days) <= filters.max_days)
    if filters.search:
        conditions.append(_search_condition(filters.search, filters.search_field))
    return conditions


def _sort_column(sort_by: str) -> ColumnElement:
    if sort_by == "employee_name":
        return _employee_name_expr()
    return col(getattr(LeaveRequest, sort_by))


def _status_count(status: LeaveStatus) -> ColumnElement[int]:
    return func.coalesce(func.sum(case((col(LeaveRequest.status) == status.value, 1), else_=0)), 0)


async def _list_requests(
    session: AsyncSession,
    actor: Actor,
    filters: LeaveRequestFilter | None = None,
) -> LeaveRequestListResponse:
    """List requests visible to the actor with filters, sorting, paging and a summary."""
    filters = filters or LeaveRequestFilter()
    conditions = _scope_conditions(actor, filters) + _filter_conditions(filters)
    join_on = col(Employee.id) == col(LeaveRequest.employee_id)

    summary_result = await session.execute(
        select(
            func.count(),
            _status_count(LeaveStatus.PENDING),
            _status_count(LeaveStatus.APPROVED),
            _status_count(LeaveStatus.REJECTED),
            _status_count(LeaveStatus.CANCELLED),
            func.avg(col(LeaveRequest.total_days)),
        )
        .select_from(LeaveRequest)
        .join(Employee, join_on)
        .where(*conditions)
    )
    total, pending, approved, rejected, cancelled, average = summary_result.one()
    average_days = Decimal(str(average)).quantize(_TWO_PLACES) if average is not None else Decimal("0.00")

    sort_column = _sort_column(filters.sort_by)
    ordering = sort_column.desc() if filters.sort_order == "desc" else sort_column.asc()
    result = await session.execute(
        select(LeaveRequest, Employee)
        .join(Employee, join_on)
        .where(*conditions)
        .order_by(ordering, col(LeaveRequest.id).asc())
        .offset(filters.offset)
        .limit(filters.limit)
    )

    return LeaveRequestListResponse(
        items=[_build_request_response(request, employee) for request, employee in result.all()],
        total=total,
        offset=filters.offset,
        limit=filters.limit,
        summary=RequestSummary(
            total=total,
            pending=pending,
            approved=approved,
            rejected=rejected,
            cancelled=cancelled,
            average_days=average_days,
        ),
    )


async def _get_request(session: AsyncSession, actor: Actor, request_id: uuid.UUID) -> LeaveRequestResponse:
    request, employee = await _get_request_with_employee(session, request_id)
    if not can_view_employee(actor, employee):
        raise Forbidden("Not allowed to view this leave request")
    return _build_request_response(request, employee)


async def _get_approval_queue(
    session: AsyncSession,
    actor: Actor,
    status: QueueStatus = "all",
    priority: QueuePriority = "all",
) -> ApprovalQueueResponse:
    """Pending requests waiting on the actor's approver role, oldest first."""
    step = approver_step_for(actor.role)
    if step is None:
        raise Forbidden("Only managers and HR have an approval queue")

    settings = get_settings()
    today = date.today()

    query = (
        select(LeaveRequest, Employee)
        .join(Employee, col(Employee.id) == col(LeaveRequest.employee_id))
        .where(col(LeaveRequest.status) == LeaveStatus.PENDING.value)
        .order_by(col(LeaveRequest.applied_at).asc(), col(LeaveRequest.id).asc())
    )
    if step == ApprovalStep.MANAGER:
        if actor.department is None:
            return ApprovalQueueResponse(items=[], total=0, overdue=0)
        query = query.where(col(Employee.department) == actor.department)
    if actor.employee_id is not None:
        query = query.where(col(LeaveRequest.employee_id) != actor.employee_id)
    if priority == "emergency":
        query = query.where(col(LeaveRequest.is_emergency).is_(True))
    elif priority == "long":
        query = query.where(col(LeaveRequest.total_days) >= settings.long_leave_threshold_days)

    result = await session.execute(query)

    items: list[ApprovalQueueItem] = []
    for request, employee in result.all():
        if next_required_approver(request.approval_level, request) != step:
            continue
        expected = expected_decision_date(request.applied_at, request.approval_level)
        is_overdue = today > expected
        if status == "overdue" and not is_overdue:
            continue
        if status == "pending" and is_overdue:
            continue
        items.append(
            ApprovalQueueItem(
                **_build_request_response(request, employee).model_dump(),
                expected_decision_date=expected,
                is_overdue=is_overdue,
                days_waiting=(today - ensure_utc(request.applied_at).date()).days,
            )
        )

    return ApprovalQueueResponse(
        items=items,
        total=len(items),
        overdue=sum(1 for item in items if item.is_overdue),
    )


async def _get_audit_trail(session: AsyncSession, actor: Actor, request_id: uuid.UUID) -> AuditTrailResponse:
    _, employee = await _get_request_with_employee(session, request_id)
    if not can_view_employee(actor, employee):
        raise Forbidden("Not allowed to view this leave request's history")
    return await list_entries(session, request_id)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_request(
    session: AsyncSession,
    actor: Actor,
    payload: SubmitLeavePayload,
    meta: RequestMeta | None = None,
) -> Success[LeaveRequestResponse] | Failure:
    """File a leave request and reserve its days."""
    return await run_mutation(session, _submit, actor, payload, meta)


async def approve_request(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
    payload: DecisionPayload | None = None,
    meta: RequestMeta | None = None,
) -> Success[LeaveRequestResponse] | Failure:
    """Approve at the actor's approval step."""
    return await run_mutation(session, _decide, actor, request_id, DecisionStatus.APPROVED, payload, meta)


async def reject_request(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
    payload: DecisionPayload | None = None,
    meta: RequestMeta | None = None,
) -> Success[LeaveRequestResponse] | Failure:
    """Reject at the actor's approval step; the request becomes REJECTED."""
    return await run_mutation(session, _decide, actor, request_id, DecisionStatus.REJECTED, payload, meta)


async def cancel_request(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
    payload: CancelPayload | None = None,
    meta: RequestMeta | None = None,
) -> Success[LeaveRequestResponse] | Failure:
    """Cancel a request and hand its days back to the balance."""
    return await run_mutation(session, _cancel, actor, request_id, payload, meta)


async def list_requests(
    session: AsyncSession,
    actor: Actor,
    filters: LeaveRequestFilter | None = None,
) -> Success[LeaveRequestListResponse] | Failure:
    return await run_query(session, _list_requests, actor, filters)


async def get_request(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
) -> Success[LeaveRequestResponse] | Failure:
    return await run_query(session, _get_request, actor, request_id)


async def get_approval_queue(
    session: AsyncSession,
    actor: Actor,
    status: QueueStatus = "all",
    priority: QueuePriority = "all",
) -> Success[ApprovalQueueResponse] | Failure:
    return await run_query(session, _get_approval_queue, actor, status, priority)


async def get_audit_trail(
    session: AsyncSession,
    actor: Actor,
    request_id: uuid.UUID,
) -> Success[AuditTrailResponse] | Failure:
    """A request's audit history, oldest first."""
    return await run_query(session, _get_audit_trail, actor, request_id)
