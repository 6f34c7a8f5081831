from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of leave a policy grants."""

    ANNUAL = "ANNUAL"
    SICK = "SICK"
    CASUAL = "CASUAL"
    EMERGENCY = "EMERGENCY"
    MATERNITY = "MATERNITY"
    PATERNITY = "PATERNITY"
    BEREAVEMENT = "BEREAVEMENT"
    UNPAID = "UNPAID"


class ApprovalLevel(enum.StrEnum):
    """Who must sign off on requests filed under a policy."""

    MANAGER = "MANAGER"
    HR = "HR"
    BOTH = "BOTH"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class DecisionStatus(enum.StrEnum):
    """Outcome of a single approver's decision."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ApprovalStep(enum.StrEnum):
    """The approver a pending request is waiting on."""

    MANAGER = "MANAGER"
    HR = "HR"
    NONE = "NONE"


class ActorRole(enum.StrEnum):
    """Role of the authenticated caller."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class HalfDaySession(enum.StrEnum):
    """Which half of the day a half-day request covers."""

    FIRST_HALF = "FIRST_HALF"
    SECOND_HALF = "SECOND_HALF"


class AuditAction(enum.StrEnum):
    """Action recorded in the leave audit log."""

    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class RiskLevel(enum.StrEnum):
    """Staffing risk for a single day."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ConflictType(enum.StrEnum):
    """Kind of scheduling conflict detected for a day."""

    UNDERSTAFFING = "UNDERSTAFFING"
    PRIORITY_OVERLAP = "PRIORITY_OVERLAP"


class ConflictSeverity(enum.StrEnum):
    """Severity of a detected conflict."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
