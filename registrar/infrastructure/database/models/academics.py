# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog and curriculum graph models.

These tables are reference data: the registrar reads them but never
authors them.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from registrar.infrastructure.database.models.base import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    type_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    has_lab: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (CheckConstraint("credits >= 0", name="credits_non_negative"),)


class Curriculum(Base):
    """A versioned study plan of one program."""

    __tablename__ = "curricula"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    program_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class CurriculumCourse(Base):
    __tablename__ = "curriculum_courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    curriculum_id: Mapped[int] = mapped_column(
        ForeignKey("curricula.id", ondelete="CASCADE"), nullable=False
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False
    )
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="required")

    __table_args__ = (
        UniqueConstraint("curriculum_id", "course_id", name="uq_curriculum_course"),
        CheckConstraint(
            "category IN ('required', 'specialization', 'elective')",
            name="category",
        ),
    )


class CurriculumRequisite(Base):
    """Directed edge: ``course_id`` requires ``required_course_id``."""

    __tablename__ = "curriculum_requisites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    curriculum_id: Mapped[int] = mapped_column(
        ForeignKey("curricula.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), nullable=False)
    required_course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default="prerequisite")

    __table_args__ = (
        UniqueConstraint(
            "curriculum_id", "course_id", "required_course_id", name="uq_curriculum_requisite"
        ),
        CheckConstraint("kind IN ('prerequisite', 'corequisite')", name="kind"),
        CheckConstraint("course_id <> required_course_id", name="no_self_edge"),
    )


class CurriculumCreditCap(Base):
    __tablename__ = "curriculum_credit_caps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    curriculum_id: Mapped[int] = mapped_column(
        ForeignKey("curricula.id", ondelete="CASCADE"), nullable=False
    )
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    max_credits: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("curriculum_id", "semester", name="uq_curriculum_credit_cap"),
    )


class Student(Base):
    """Minimal student profile; owned by the profile subsystem."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    program_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    semester: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="active")


class CurriculumAssignment(Base):
    __tablename__ = "curriculum_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    curriculum_id: Mapped[int] = mapped_column(ForeignKey("curricula.id"), nullable=False)
