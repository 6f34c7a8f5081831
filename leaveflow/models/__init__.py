from sqlmodel import SQLModel

from leaveflow.models.audit import LeaveAuditLog
from leaveflow.models.balance import LeaveBalance
from leaveflow.models.base import TimestampMixin, UUIDBase
from leaveflow.models.employee import Employee
from leaveflow.models.enums import (
    ActorRole,
    ApprovalLevel,
    ApprovalStep,
    AuditAction,
    ConflictSeverity,
    ConflictType,
    DecisionStatus,
    HalfDaySession,
    LeaveStatus,
    LeaveType,
    RiskLevel,
)
from leaveflow.models.holiday import Holiday
from leaveflow.models.policy import LeavePolicy
from leaveflow.models.request import LeaveRequest

__all__ = [
    "ActorRole",
    "ApprovalLevel",
    "ApprovalStep",
    "AuditAction",
    "ConflictSeverity",
    "ConflictType",
    "DecisionStatus",
    "Employee",
    "HalfDaySession",
    "Holiday",
    "LeaveAuditLog",
    "LeaveBalance",
    "LeavePolicy",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "RiskLevel",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
