"""Approval routing for leave requests.

Every approve, reject and queue decision goes through ``next_required_approver``
so the routing rules live in one place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from leaveflow.models.base import ensure_utc
from leaveflow.models.enums import ActorRole, ApprovalLevel, ApprovalStep, DecisionStatus, LeaveStatus
from leaveflow.services.duration import add_business_days

if TYPE_CHECKING:
    from datetime import date, datetime

# Business days an approver has to decide, per approval level.
_DECISION_SLA_DAYS: dict[ApprovalLevel, int] = {
    ApprovalLevel.MANAGER: 1,
    ApprovalLevel.HR: 2,
    ApprovalLevel.BOTH: 3,
}

_STEP_FOR_ROLE: dict[ActorRole, ApprovalStep] = {
    ActorRole.MANAGER: ApprovalStep.MANAGER,
    ActorRole.ADMIN: ApprovalStep.HR,
}


class ApprovalState(Protocol):
    """The parts of a request that determine its next approver."""

    status: str
    manager_approval_status: str | None
    hr_approval_status: str | None


def next_required_approver(approval_level: ApprovalLevel | str, request: ApprovalState) -> ApprovalStep:
    """Return which approver a request is waiting on.

    MANAGER and HR levels need a single decision from that approver. BOTH
    needs the manager first and HR only after a manager approval. Anything
    that is no longer PENDING waits on nobody.
    """
    if request.status != LeaveStatus.PENDING:
        return ApprovalStep.NONE

    level = ApprovalLevel(approval_level)
    manager_status = request.manager_approval_status
    hr_status = request.hr_approval_status

    if level == ApprovalLevel.MANAGER:
        return ApprovalStep.MANAGER if manager_status is None else ApprovalStep.NONE
    if level == ApprovalLevel.HR:
        return ApprovalStep.HR if hr_status is None else ApprovalStep.NONE

    if manager_status is None:
        return ApprovalStep.MANAGER
    if manager_status == DecisionStatus.APPROVED and hr_status is None:
        return ApprovalStep.HR
    return ApprovalStep.NONE


def approver_step_for(role: ActorRole | str) -> ApprovalStep | None:
    """Map an actor role to the approval step it may decide, if any."""
    return _STEP_FOR_ROLE.get(ActorRole(role))


def expected_decision_date(applied_at: datetime, approval_level: ApprovalLevel | str) -> date:
    """Date by which a decision is due, counted in business days from submission."""
    days = _DECISION_SLA_DAYS[ApprovalLevel(approval_level)]
    return add_business_days(ensure_utc(applied_at).date(), days)
