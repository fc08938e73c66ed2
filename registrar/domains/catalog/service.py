# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog views built on the course state evaluator.

Read-only: curriculum progress, the offerings a student may register this
period, and the student's current weekly schedule.
"""

import logging
from itertools import groupby

from registrar.domains.common import EligibilityReason, Identity
from registrar.domains.course_state.evaluator import CourseStatus, derive_state, is_completed
from registrar.domains.credits.accountant import current_load, max_load
from registrar.domains.enrollment.service import EnrollmentService
from registrar.domains.errors import NotEligible
from registrar.domains.history.repository import group_by_course
from registrar.models.catalog import (
    CourseOfferingResponse,
    CourseProgressResponse,
    CreditSummaryResponse,
    OfferingsResponse,
    ProgressResponse,
    RequisiteStatusResponse,
    ScheduleEntryResponse,
    ScheduleResponse,
    SectionOfferingResponse,
    SemesterProgressResponse,
)
from registrar.models.common import MeetingResponse

logger = logging.getLogger(__name__)

_HIDDEN_FROM_OFFERINGS = frozenset(
    {CourseStatus.REGISTERED, CourseStatus.WAITING, CourseStatus.COMPLETED}
)


class CatalogService:
    """Read-only student views.

    Attributes:
        enrollment: Coordinator whose repositories and gate are reused.
    """

    def __init__(self, enrollment: EnrollmentService) -> None:
        self.enrollment = enrollment

    async def get_progress(self, identity: Identity) -> ProgressResponse:
        """Every curriculum course with its derived state, grouped by semester.

        Works outside any active period; grace rules then never escalate.

        Raises:
            NotEligible: If the student has no curriculum assigned.
        """
        curriculum_id = await self.enrollment.curricula.get_curriculum_id(identity.student_id)
        if curriculum_id is None:
            raise NotEligible(EligibilityReason.CURRICULUM_NOT_ASSIGNED)

        graph = await self.enrollment.curricula.load_graph(curriculum_id)
        period = await self.enrollment.calendar.active_period()
        by_course = group_by_course(await self.enrollment.history.load_history(identity.student_id))
        passing = self.enrollment.passing_score

        def completed(course_id: int) -> bool:
            return is_completed(by_course.get(course_id, []), passing)

        def requisites(ids: list[int]) -> list[RequisiteStatusResponse]:
            return [
                RequisiteStatusResponse(
                    course_id=i,
                    code=graph.courses[i].code if i in graph.courses else None,
                    completed=completed(i),
                )
                for i in ids
            ]

        entries = []
        for course in graph.ordered_courses():
            prerequisites = requisites(graph.prerequisites_of(course.course_id))
            state = derive_state(
                by_course.get(course.course_id, []),
                period,
                has_unmet_prerequisites=not all(p.completed for p in prerequisites),
                passing_score=passing,
            )
            entries.append(
                CourseProgressResponse(
                    course_id=course.course_id,
                    code=course.code,
                    title=course.title,
                    credits=course.credits,
                    category=course.category,
                    state=state.status.value,
                    failure_count=state.failure_count,
                    last_score=state.last_score,
                    last_period=state.last_period,
                    prerequisites=prerequisites,
                    corequisites=requisites(graph.corequisites_of(course.course_id)),
                )
            )

        semesters = [
            SemesterProgressResponse(semester=semester, courses=list(items))
            for semester, items in groupby(
                entries, key=lambda e: graph.courses[e.course_id].semester
            )
        ]
        return ProgressResponse(
            student_id=identity.student_id,
            curriculum_id=curriculum_id,
            active_period=period.label if period else None,
            semesters=semesters,
        )

    async def list_offerings(self, identity: Identity) -> OfferingsResponse:
        """Courses and sections the student may register this period.

        Includes the courses of the student's current semester plus any
        pending or mandatory repeats, minus registered, waiting and
        completed courses.

        Raises:
            NotEligible: If the student may not register.
        """
        decision = await self.enrollment.gate.check_registration_eligible(identity)
        decision.raise_for_denial()
        ctx = await self.enrollment.load_context(identity, decision.period, decision.curriculum_id)

        offered = [
            course
            for course in ctx.curriculum.ordered_courses()
            if ctx.state_of(course.course_id).status not in _HIDDEN_FROM_OFFERINGS
            and (
                course.semester == ctx.student_semester
                or ctx.state_of(course.course_id).needs_repeat
            )
        ]
        sections = await self.enrollment.sections.list_for_courses(
            ctx.period.id, [c.course_id for c in offered]
        )

        courses = [
            CourseOfferingResponse(
                course_id=course.course_id,
                code=course.code,
                title=course.title,
                credits=course.credits,
                semester=course.semester,
                state=ctx.state_of(course.course_id).status.value,
                sections=[
                    SectionOfferingResponse(
                        section_id=s.id,
                        code=s.code,
                        instructor=s.instructor,
                        seats_available=s.seats_available,
                        seats_max=s.seats_max,
                        meetings=[MeetingResponse.from_meeting(m) for m in s.meetings],
                    )
                    for s in sections
                    if s.course_id == course.course_id
                ],
            )
            for course in offered
        ]

        maximum = max_load(ctx.curriculum, ctx.student_semester)
        registered = current_load(ctx.history, ctx.period.id)
        mandatory = ctx.mandatory_courses()
        blocked = [c.course_id for c in mandatory if c.course_id not in ctx.open_seat_courses]

        messages = []
        if blocked:
            codes = ", ".join(ctx.curriculum.courses[i].code for i in blocked)
            messages.append(
                f"Registration is frozen: mandatory repeat courses {codes} have no open sections"
            )
        elif mandatory:
            codes = ", ".join(c.code for c in mandatory)
            messages.append(
                f"Mandatory repeat courses {codes} must be registered before later-semester courses"
            )
        if not courses:
            messages.append("No courses are available for registration")

        return OfferingsResponse(
            period_id=ctx.period.id,
            semester=ctx.student_semester,
            courses=courses,
            credits=CreditSummaryResponse(
                maximum=maximum,
                registered=registered,
                remaining=max(0, maximum - registered),
            ),
            blocked_course_ids=blocked,
            messages=messages,
        )

    async def get_schedule(self, identity: Identity) -> ScheduleResponse:
        """The student's registered sections in the active period.

        Raises:
            NotEligible: If there is no active period.
        """
        return await self.schedule_for(identity.student_id)

    async def schedule_for(self, student_id: int) -> ScheduleResponse:
        """Registered sections of any student in the active period.

        Callers authorize access; this only assembles the view.

        Raises:
            NotEligible: If there is no active period.
        """
        period = await self.enrollment.calendar.active_period()
        if period is None:
            raise NotEligible(EligibilityReason.NO_ACTIVE_PERIOD)

        history = await self.enrollment.history.load_history(student_id)
        registered = [
            a for a in history if a.outcome == "registered" and a.period_id == period.id
        ]
        sections = await self.enrollment.sections.get_sections(
            a.section_id for a in registered if a.section_id is not None
        )

        curriculum_id = await self.enrollment.curricula.get_curriculum_id(student_id)
        courses = {}
        if curriculum_id is not None:
            courses = (await self.enrollment.curricula.load_graph(curriculum_id)).courses

        entries = []
        for attempt in registered:
            section = sections.get(attempt.section_id)
            course = courses.get(attempt.course_id)
            entries.append(
                ScheduleEntryResponse(
                    attempt_id=attempt.id,
                    section_id=attempt.section_id,
                    section_code=section.code if section else None,
                    course_id=attempt.course_id,
                    course_code=course.code if course else None,
                    course_title=course.title if course else None,
                    credits=attempt.credits,
                    instructor=section.instructor if section else None,
                    meetings=[MeetingResponse.from_meeting(m) for m in section.meetings]
                    if section
                    else [],
                )
            )

        return ScheduleResponse(
            student_id=student_id,
            period_id=period.id,
            entries=entries,
            total_credits=sum(e.credits for e in entries),
        )
