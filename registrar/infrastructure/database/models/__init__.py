# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the registrar store.

Importing this package registers every table on ``Base.metadata``.
"""

from registrar.infrastructure.database.models.academics import (
    Course,
    Curriculum,
    CurriculumAssignment,
    CurriculumCourse,
    CurriculumCreditCap,
    CurriculumRequisite,
    Student,
)
from registrar.infrastructure.database.models.audit import AuditEntry
from registrar.infrastructure.database.models.base import Base
from registrar.infrastructure.database.models.calendar import AcademicPeriod, EnrollmentWindow
from registrar.infrastructure.database.models.documents import StudentDocument
from registrar.infrastructure.database.models.enrollment import (
    AmendmentRequest,
    AttemptRecord,
    Section,
    SectionMeeting,
)

__all__ = [
    "Base",
    "Course",
    "Curriculum",
    "CurriculumCourse",
    "CurriculumRequisite",
    "CurriculumCreditCap",
    "Student",
    "CurriculumAssignment",
    "AcademicPeriod",
    "EnrollmentWindow",
    "Section",
    "SectionMeeting",
    "AttemptRecord",
    "AmendmentRequest",
    "StudentDocument",
    "AuditEntry",
]
