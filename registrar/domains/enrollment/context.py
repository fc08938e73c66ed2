# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-request enrollment snapshot.

Everything the validation phase needs is read once, before any mutation:
the curriculum graph, the full attempt history, the derived state of every
curriculum course, the sections currently registered, and which courses
still have open seats in the active period.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable

from registrar.domains.common import Identity, Period, SectionInfo
from registrar.domains.course_state.evaluator import (
    CourseState,
    CourseStatus,
    derive_state,
    is_completed,
)
from registrar.domains.curriculum.repository import (
    CurriculumCourseInfo,
    CurriculumGraph,
    CurriculumRepository,
)
from registrar.domains.enrollment.sections import SectionRepository
from registrar.domains.history.repository import (
    AttemptSnapshot,
    HistoryRepository,
    group_by_course,
)


@dataclass
class EnrollmentContext:
    """Read-only snapshot for one student in the active period.

    Attributes:
        identity: The student.
        period: The active period.
        curriculum: The student's curriculum graph.
        student_semester: The student's current semester.
        history: Every attempt of the student, oldest first.
        registered_sections: Sections registered in the active period.
        open_seat_courses: Curriculum courses with a free seat somewhere.
        passing_score: Minimum score for a pass to count.
        states: Derived state per curriculum course.
    """

    identity: Identity
    period: Period
    curriculum: CurriculumGraph
    student_semester: int
    history: list[AttemptSnapshot]
    registered_sections: list[SectionInfo] = field(default_factory=list)
    open_seat_courses: set[int] = field(default_factory=set)
    passing_score: float = 3.0
    states: dict[int, CourseState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.by_course = group_by_course(self.history)
        if not self.states:
            self.states = self._derive_states()

    def _derive_states(self) -> dict[int, CourseState]:
        return {
            course_id: derive_state(
                self.by_course.get(course_id, []),
                self.period,
                has_unmet_prerequisites=self.first_unmet_prerequisite(course_id) is not None,
                passing_score=self.passing_score,
            )
            for course_id in self.curriculum.courses
        }

    @property
    def registered(self) -> list[AttemptSnapshot]:
        """Attempts registered in the active period."""
        return [
            a for a in self.history if a.outcome == "registered" and a.period_id == self.period.id
        ]

    def state_of(self, course_id: int) -> CourseState:
        return self.states[course_id]

    def is_course_completed(self, course_id: int) -> bool:
        return is_completed(self.by_course.get(course_id, []), self.passing_score)

    def first_unmet_prerequisite(self, course_id: int) -> int | None:
        for required_id in self.curriculum.prerequisites_of(course_id):
            if not self.is_course_completed(required_id):
                return required_id
        return None

    def mandatory_courses(self) -> list[CurriculumCourseInfo]:
        """Repeat-mandatory courses, ordered by (semester, code)."""
        return [
            c
            for c in self.curriculum.ordered_courses()
            if self.states[c.course_id].status is CourseStatus.REPEAT_MANDATORY
        ]

    def without_attempts(self, attempt_ids: Iterable[int]) -> "EnrollmentContext":
        """Snapshot as it would look after deleting the given attempts."""
        dropped = set(attempt_ids)
        history = [a for a in self.history if a.id not in dropped]
        kept_sections = {
            a.section_id
            for a in history
            if a.outcome == "registered" and a.period_id == self.period.id
        }
        return replace(
            self,
            history=history,
            registered_sections=[s for s in self.registered_sections if s.id in kept_sections],
            states={},
        )


async def load_context(
    identity: Identity,
    period: Period,
    curriculum_id: int,
    *,
    curricula: CurriculumRepository,
    history: HistoryRepository,
    sections: SectionRepository,
    passing_score: float,
) -> EnrollmentContext:
    """Read the enrollment snapshot for a student.

    Args:
        identity: The student.
        period: The active period.
        curriculum_id: The student's curriculum.
        curricula: Curriculum reader.
        history: Attempt history reader.
        sections: Section reader.
        passing_score: Minimum score for a pass to count.

    Returns:
        The populated context.
    """
    graph = await curricula.load_graph(curriculum_id)
    semester = await curricula.get_student_semester(identity.student_id)
    attempts = await history.load_history(identity.student_id)

    registered_section_ids = [
        a.section_id
        for a in attempts
        if a.outcome == "registered" and a.period_id == period.id and a.section_id is not None
    ]
    registered = await sections.get_sections(registered_section_ids)
    open_courses = await sections.courses_with_open_seats(period.id, graph.courses.keys())

    return EnrollmentContext(
        identity=identity,
        period=period,
        curriculum=graph,
        student_semester=semester,
        history=attempts,
        registered_sections=[registered[i] for i in registered_section_ids if i in registered],
        open_seat_courses=open_courses,
        passing_score=passing_score,
    )
