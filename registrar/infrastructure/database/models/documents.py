# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Evidence documents, owned by the document subsystem and read here."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from registrar.infrastructure.database.models.base import Base


class StudentDocument(Base):
    __tablename__ = "student_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    period_id: Mapped[int] = mapped_column(ForeignKey("academic_periods.id"), nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    review_status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint(
            "review_status IN ('pending', 'approved', 'rejected')", name="review_status"
        ),
        Index("ix_student_documents_student_period", "student_id", "period_id"),
    )
