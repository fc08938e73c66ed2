# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial registrar schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-01-15
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    """Create registrar tables."""
    # =========================================================================
    # CATALOG AND CURRICULUM
    # =========================================================================

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("code", sa.String(20), nullable=False, unique=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("credits", sa.Integer, nullable=False),
        sa.Column("type_name", sa.String(50), nullable=True),
        sa.Column("has_lab", sa.Boolean, nullable=False, server_default="false"),
        sa.CheckConstraint("credits >= 0", name="ck_courses_credits_non_negative"),
    )

    op.create_table(
        "curricula",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("program_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
    )
    op.create_index("ix_curricula_program_id", "curricula", ["program_id"])

    op.create_table(
        "curriculum_courses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "curriculum_id",
            sa.Integer,
            sa.ForeignKey("curricula.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("semester", sa.Integer, nullable=False),
        sa.Column("category", sa.String(20), nullable=False, server_default="required"),
        sa.UniqueConstraint("curriculum_id", "course_id", name="uq_curriculum_course"),
        sa.CheckConstraint(
            "category IN ('required', 'specialization', 'elective')",
            name="ck_curriculum_courses_category",
        ),
    )

    op.create_table(
        "curriculum_requisites",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "curriculum_id",
            sa.Integer,
            sa.ForeignKey("curricula.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column(
            "required_course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False
        ),
        sa.Column("kind", sa.String(20), nullable=False, server_default="prerequisite"),
        sa.UniqueConstraint(
            "curriculum_id", "course_id", "required_course_id", name="uq_curriculum_requisite"
        ),
        sa.CheckConstraint(
            "kind IN ('prerequisite', 'corequisite')", name="ck_curriculum_requisites_kind"
        ),
        sa.CheckConstraint(
            "course_id <> required_course_id", name="ck_curriculum_requisites_no_self_edge"
        ),
    )
    op.create_index(
        "ix_curriculum_requisites_curriculum_id", "curriculum_requisites", ["curriculum_id"]
    )

    op.create_table(
        "curriculum_credit_caps",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "curriculum_id",
            sa.Integer,
            sa.ForeignKey("curricula.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("semester", sa.Integer, nullable=False),
        sa.Column("max_credits", sa.Integer, nullable=True),
        sa.UniqueConstraint("curriculum_id", "semester", name="uq_curriculum_credit_cap"),
    )

    # =========================================================================
    # STUDENTS
    # =========================================================================

    op.create_table(
        "students",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("program_id", sa.Integer, nullable=False),
        sa.Column("semester", sa.Integer, nullable=False, server_default="1"),
        sa.Column("status", sa.String(30), nullable=False, server_default="active"),
    )
    op.create_index("ix_students_program_id", "students", ["program_id"])

    op.create_table(
        "curriculum_assignments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("curriculum_id", sa.Integer, sa.ForeignKey("curricula.id"), nullable=False),
    )

    # =========================================================================
    # CALENDAR
    # =========================================================================

    op.create_table(
        "academic_periods",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("term", sa.Integer, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default="false"),
        sa.UniqueConstraint("year", "term", name="uq_academic_period_year_term"),
        sa.CheckConstraint("term IN (1, 2)", name="ck_academic_periods_term"),
        sa.CheckConstraint(
            "NOT (is_active AND is_archived)", name="ck_academic_periods_archived_not_active"
        ),
    )
    op.create_index(
        "uq_academic_period_single_active",
        "academic_periods",
        ["is_active"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "enrollment_windows",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "period_id",
            sa.Integer,
            sa.ForeignKey("academic_periods.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("program_id", sa.Integer, nullable=False),
        sa.Column("documents_open", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("registration_open", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("amendment_open", sa.Boolean, nullable=False, server_default="false"),
        sa.UniqueConstraint(
            "period_id", "program_id", name="uq_enrollment_window_period_program"
        ),
    )

    # =========================================================================
    # SECTIONS AND ENROLLMENT
    # =========================================================================

    op.create_table(
        "sections",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column(
            "period_id",
            sa.Integer,
            sa.ForeignKey("academic_periods.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("instructor", sa.String(200), nullable=True),
        sa.Column("seats_max", sa.Integer, nullable=False),
        sa.Column("seats_available", sa.Integer, nullable=False),
        sa.CheckConstraint(
            "seats_available >= 0 AND seats_available <= seats_max",
            name="ck_sections_seats_in_bounds",
        ),
    )
    op.create_index("ix_sections_period_course", "sections", ["period_id", "course_id"])

    op.create_table(
        "section_meetings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "section_id",
            sa.Integer,
            sa.ForeignKey("sections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day", sa.String(12), nullable=False),
        sa.Column("starts_at", sa.Time, nullable=False),
        sa.Column("ends_at", sa.Time, nullable=False),
        sa.Column("room", sa.String(50), nullable=True),
        sa.CheckConstraint("starts_at < ends_at", name="ck_section_meetings_time_order"),
    )
    op.create_index("ix_section_meetings_section_id", "section_meetings", ["section_id"])

    op.create_table(
        "attempt_records",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column(
            "period_id", sa.Integer, sa.ForeignKey("academic_periods.id"), nullable=False
        ),
        sa.Column(
            "section_id",
            sa.Integer,
            sa.ForeignKey("sections.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("outcome", sa.String(20), nullable=False),
        sa.Column("score", sa.Numeric(4, 2), nullable=True),
        _created_at(),
        sa.CheckConstraint(
            "outcome IN ('registered', 'passed', 'failed', 'waived')",
            name="ck_attempt_records_outcome",
        ),
    )
    op.create_index("ix_attempt_records_student", "attempt_records", ["student_id"])
    op.create_index(
        "uq_attempt_records_single_registration",
        "attempt_records",
        ["student_id", "course_id", "period_id"],
        unique=True,
        postgresql_where=sa.text("outcome = 'registered'"),
    )

    op.create_table(
        "student_documents",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "period_id", sa.Integer, sa.ForeignKey("academic_periods.id"), nullable=False
        ),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("review_status", sa.String(20), nullable=False, server_default="pending"),
        sa.CheckConstraint(
            "review_status IN ('pending', 'approved', 'rejected')",
            name="ck_student_documents_review_status",
        ),
    )
    op.create_index(
        "ix_student_documents_student_period",
        "student_documents",
        ["student_id", "period_id"],
    )

    op.create_table(
        "amendment_requests",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("program_id", sa.Integer, nullable=False),
        sa.Column(
            "period_id", sa.Integer, sa.ForeignKey("academic_periods.id"), nullable=False
        ),
        sa.Column("add_section_ids", sa.JSON, nullable=False),
        sa.Column("drop_section_ids", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("reviewer_id", sa.Integer, nullable=True),
        sa.Column("review_note", sa.Text, nullable=True),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_amendment_requests_status",
        ),
    )
    op.create_index(
        "uq_amendment_requests_single_pending",
        "amendment_requests",
        ["student_id", "period_id"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )

    # =========================================================================
    # AUDIT
    # =========================================================================

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("actor_id", sa.Integer, nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("detail", sa.Text, nullable=False),
        _created_at(),
    )
    op.create_index("ix_audit_log_action", "audit_log", ["action"])


def downgrade() -> None:
    """Drop registrar tables in reverse dependency order."""
    op.drop_table("audit_log")
    op.drop_table("amendment_requests")
    op.drop_table("student_documents")
    op.drop_table("attempt_records")
    op.drop_table("section_meetings")
    op.drop_table("sections")
    op.drop_table("enrollment_windows")
    op.drop_table("academic_periods")
    op.drop_table("curriculum_assignments")
    op.drop_table("students")
    op.drop_table("curriculum_credit_caps")
    op.drop_table("curriculum_requisites")
    op.drop_table("curriculum_courses")
    op.drop_table("curricula")
    op.drop_table("courses")
