"""Initial leave schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _days() -> sa.Numeric:
    return sa.Numeric(6, 2)


def upgrade() -> None:
    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("role", sa.String(length=50), server_default="EMPLOYEE", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("manager_id", sa.Uuid(), nullable=True),
    )
    op.create_index("ix_employee_department_active", "employee", ["department", "is_active"])

    op.create_table(
        "leave_policy",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("code", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("leave_type", sa.String(length=50), nullable=False),
        sa.Column("approval_level", sa.String(length=50), server_default="MANAGER", nullable=False),
        sa.Column("max_days_per_request", _days(), nullable=False),
        sa.Column("min_notice_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("default_entitlement_days", _days(), nullable=False),
        sa.Column("escalation_threshold_days", _days(), nullable=True),
        sa.Column("min_tenure_months", sa.Integer(), server_default="0", nullable=False),
        sa.Column("half_day_allowed", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("exclude_weekends", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("exclude_holidays", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("applicable_departments", sa.JSON(), nullable=False),
        sa.Column("applicable_locations", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.UniqueConstraint("code", name="uq_leave_policy_code"),
    )
    op.create_index("ix_leave_policy_leave_type", "leave_policy", ["leave_type"])
    op.create_index("ix_leave_policy_is_active", "leave_policy", ["is_active"])

    op.create_table(
        "holiday",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("fiscal_year", sa.Integer(), nullable=False),
        sa.UniqueConstraint("date", "location", name="uq_holiday_date_location"),
    )
    op.create_index("ix_holiday_date", "holiday", ["date"])
    op.create_index("ix_holiday_fiscal_year", "holiday", ["fiscal_year"])

    op.create_table(
        "leave_balance",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id"), nullable=False),
        sa.Column("policy_id", sa.Uuid(), sa.ForeignKey("leave_policy.id"), nullable=False),
        sa.Column("fiscal_year", sa.Integer(), nullable=False),
        sa.Column("entitled_days", _days(), nullable=False),
        sa.Column("used_days", _days(), nullable=False),
        sa.Column("pending_days", _days(), nullable=False),
        sa.Column("available_days", _days(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.UniqueConstraint("employee_id", "policy_id", "fiscal_year", name="uq_balance_employee_policy_year"),
    )
    op.create_index("ix_leave_balance_employee_id", "leave_balance", ["employee_id"])
    op.create_index("ix_leave_balance_policy_id", "leave_balance", ["policy_id"])

    op.create_table(
        "leave_request",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id"), nullable=False),
        sa.Column("policy_id", sa.Uuid(), sa.ForeignKey("leave_policy.id"), nullable=False),
        sa.Column("leave_type", sa.String(length=50), nullable=False),
        sa.Column("approval_level", sa.String(length=50), nullable=False),
        sa.Column("fiscal_year", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_days", _days(), nullable=False),
        sa.Column("is_half_day", sa.Boolean(), nullable=False),
        sa.Column("half_day_session", sa.String(length=50), nullable=True),
        sa.Column("is_backdated", sa.Boolean(), nullable=False),
        sa.Column("is_emergency", sa.Boolean(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=50), server_default="PENDING", nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("manager_approved_by", sa.Uuid(), nullable=True),
        sa.Column("manager_approval_status", sa.String(length=50), nullable=True),
        sa.Column("manager_decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_comments", sa.String(), nullable=True),
        sa.Column("hr_approved_by", sa.Uuid(), nullable=True),
        sa.Column("hr_approval_status", sa.String(length=50), nullable=True),
        sa.Column("hr_decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("hr_comments", sa.String(), nullable=True),
        sa.Column("final_approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.Uuid(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("cancelled_by", sa.Uuid(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
    )
    op.create_index("ix_leave_request_employee_id", "leave_request", ["employee_id"])
    op.create_index("ix_leave_request_policy_id", "leave_request", ["policy_id"])
    op.create_index("ix_leave_request_status", "leave_request", ["status"])
    op.create_index("ix_leave_request_employee_dates", "leave_request", ["employee_id", "start_date", "end_date"])
    op.create_index("ix_leave_request_status_dates", "leave_request", ["status", "start_date", "end_date"])

    op.create_table(
        "leave_audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("request_id", sa.Uuid(), sa.ForeignKey("leave_request.id"), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("actor_role", sa.String(length=50), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("approver_role", sa.String(length=50), nullable=True),
        sa.Column("previous_status", sa.String(length=50), nullable=True),
        sa.Column("new_status", sa.String(length=50), nullable=False),
        sa.Column("comments", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("details_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_leave_audit_log_request_id", "leave_audit_log", ["request_id"])
    op.create_index("ix_leave_audit_log_created_at", "leave_audit_log", ["created_at"])
    op.create_index("ix_leave_audit_request_created", "leave_audit_log", ["request_id", "created_at"])


def downgrade() -> None:
    op.drop_table("leave_audit_log")
    op.drop_table("leave_request")
    op.drop_table("leave_balance")
    op.drop_table("holiday")
    op.drop_table("leave_policy")
    op.drop_table("employee")
