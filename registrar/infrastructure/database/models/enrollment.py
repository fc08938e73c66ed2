# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section, attempt history and amendment request models."""

from datetime import datetime, time
from decimal import Decimal

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registrar.infrastructure.database.models.base import Base
from registrar.utils.datetime import utc_now


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), nullable=False)
    period_id: Mapped[int] = mapped_column(
        ForeignKey("academic_periods.id", ondelete="CASCADE"), nullable=False
    )
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    instructor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    seats_max: Mapped[int] = mapped_column(Integer, nullable=False)
    seats_available: Mapped[int] = mapped_column(Integer, nullable=False)

    meetings: Mapped[list["SectionMeeting"]] = relationship(
        back_populates="section",
        order_by="SectionMeeting.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "seats_available >= 0 AND seats_available <= seats_max",
            name="seats_in_bounds",
        ),
        Index("ix_sections_period_course", "period_id", "course_id"),
    )


class SectionMeeting(Base):
    """One weekly time block of a section."""

    __tablename__ = "section_meetings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    section_id: Mapped[int] = mapped_column(
        ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[str] = mapped_column(String(12), nullable=False)
    starts_at: Mapped[time] = mapped_column(Time, nullable=False)
    ends_at: Mapped[time] = mapped_column(Time, nullable=False)
    room: Mapped[str | None] = mapped_column(String(50), nullable=True)

    section: Mapped[Section] = relationship(back_populates="meetings")

    __table_args__ = (CheckConstraint("starts_at < ends_at", name="time_order"),)


class AttemptRecord(Base):
    """One enrollment event of a student in a course during a period."""

    __tablename__ = "attempt_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), nullable=False)
    period_id: Mapped[int] = mapped_column(ForeignKey("academic_periods.id"), nullable=False)
    section_id: Mapped[int | None] = mapped_column(
        ForeignKey("sections.id", ondelete="SET NULL"), nullable=True
    )
    outcome: Mapped[str] = mapped_column(String(20), nullable=False)
    score: Mapped[Decimal | None] = mapped_column(Numeric(4, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        CheckConstraint(
            "outcome IN ('registered', 'passed', 'failed', 'waived')", name="outcome"
        ),
        Index("ix_attempt_records_student", "student_id"),
        Index(
            "uq_attempt_records_single_registration",
            "student_id",
            "course_id",
            "period_id",
            unique=True,
            postgresql_where=text("outcome = 'registered'"),
        ),
    )


class AmendmentRequest(Base):
    """Queued add/drop change awaiting a reviewer decision."""

    __tablename__ = "amendment_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    program_id: Mapped[int] = mapped_column(Integer, nullable=False)
    period_id: Mapped[int] = mapped_column(ForeignKey("academic_periods.id"), nullable=False)
    add_section_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    drop_section_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    reviewer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="status"),
        Index(
            "uq_amendment_requests_single_pending",
            "student_id",
            "period_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
        ),
    )
