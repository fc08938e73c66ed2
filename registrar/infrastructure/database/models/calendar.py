# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic period and enrollment window models."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from registrar.infrastructure.database.models.base import Base


class AcademicPeriod(Base):
    __tablename__ = "academic_periods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    term: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("year", "term", name="uq_academic_period_year_term"),
        CheckConstraint("term IN (1, 2)", name="term"),
        CheckConstraint("NOT (is_active AND is_archived)", name="archived_not_active"),
        Index(
            "uq_academic_period_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active"),
        ),
    )


class EnrollmentWindow(Base):
    """Per (period, program) gates. Rows are created lazily, all closed."""

    __tablename__ = "enrollment_windows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    period_id: Mapped[int] = mapped_column(
        ForeignKey("academic_periods.id", ondelete="CASCADE"), nullable=False
    )
    program_id: Mapped[int] = mapped_column(Integer, nullable=False)
    documents_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    registration_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    amendment_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("period_id", "program_id", name="uq_enrollment_window_period_program"),
    )
