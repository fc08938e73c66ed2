# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum graph accessor.

Loads the curriculum version a student is assigned to: the course set with
each course's target semester and category, the prerequisite and
corequisite edges, and the per-semester credit caps. The graph is consumed
here, never edited.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.domains.errors import NotFound
from registrar.infrastructure.database.models import (
    Course,
    CurriculumAssignment,
    CurriculumCourse,
    CurriculumCreditCap,
    CurriculumRequisite,
    Student,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurriculumCourseInfo:
    course_id: int
    code: str
    title: str
    credits: int
    semester: int
    category: str = "required"


@dataclass
class CurriculumGraph:
    """One curriculum version as a read-only graph.

    Attributes:
        curriculum_id: Curriculum identifier.
        courses: Courses keyed by course id.
        prerequisites: Course id to the course ids it hard-requires.
        corequisites: Course id to the course ids it must be taken with.
        credit_caps: Semester to explicit credit cap (None when unset).
    """

    curriculum_id: int
    courses: dict[int, CurriculumCourseInfo] = field(default_factory=dict)
    prerequisites: dict[int, list[int]] = field(default_factory=dict)
    corequisites: dict[int, list[int]] = field(default_factory=dict)
    credit_caps: dict[int, int | None] = field(default_factory=dict)

    def __contains__(self, course_id: int) -> bool:
        return course_id in self.courses

    def prerequisites_of(self, course_id: int) -> list[int]:
        return self.prerequisites.get(course_id, [])

    def corequisites_of(self, course_id: int) -> list[int]:
        return self.corequisites.get(course_id, [])

    def courses_in_semester(self, semester: int) -> list[CurriculumCourseInfo]:
        return [c for c in self.courses.values() if c.semester == semester]

    def ordered_courses(self) -> list[CurriculumCourseInfo]:
        """Courses sorted by (semester, code)."""
        return sorted(self.courses.values(), key=lambda c: (c.semester, c.code))


class CurriculumRepository:
    """Reads curriculum assignments and graphs.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_curriculum_id(self, student_id: int) -> int | None:
        """Get the curriculum a student is assigned to, if any."""
        result = await self.db.execute(
            select(CurriculumAssignment.curriculum_id).where(
                CurriculumAssignment.student_id == student_id
            )
        )
        return result.scalar_one_or_none()

    async def get_student_semester(self, student_id: int) -> int:
        """Get the student's current semester number.

        Raises:
            NotFound: If the student does not exist.
        """
        result = await self.db.execute(select(Student.semester).where(Student.id == student_id))
        semester = result.scalar_one_or_none()
        if semester is None:
            raise NotFound("student", student_id)
        return semester

    async def load_graph(self, curriculum_id: int) -> CurriculumGraph:
        """Load a full curriculum graph.

        Args:
            curriculum_id: Curriculum identifier.

        Returns:
            The curriculum graph. Empty if the curriculum has no courses.
        """
        graph = CurriculumGraph(curriculum_id=curriculum_id)

        course_rows = await self.db.execute(
            select(CurriculumCourse, Course)
            .join(Course, Course.id == CurriculumCourse.course_id)
            .where(CurriculumCourse.curriculum_id == curriculum_id)
        )
        for entry, course in course_rows.all():
            graph.courses[course.id] = CurriculumCourseInfo(
                course_id=course.id,
                code=course.code,
                title=course.title,
                credits=course.credits,
                semester=entry.semester,
                category=entry.category,
            )

        edge_rows = await self.db.execute(
            select(CurriculumRequisite)
            .where(CurriculumRequisite.curriculum_id == curriculum_id)
            .order_by(CurriculumRequisite.id)
        )
        for edge in edge_rows.scalars().all():
            target = graph.corequisites if edge.kind == "corequisite" else graph.prerequisites
            target.setdefault(edge.course_id, []).append(edge.required_course_id)

        cap_rows = await self.db.execute(
            select(CurriculumCreditCap).where(CurriculumCreditCap.curriculum_id == curriculum_id)
        )
        for cap in cap_rows.scalars().all():
            graph.credit_caps[cap.semester] = cap.max_credits

        logger.debug(
            "Loaded curriculum %s: %d courses, %d prerequisite edges",
            curriculum_id,
            len(graph.courses),
            sum(len(v) for v in graph.prerequisites.values()),
        )
        return graph
