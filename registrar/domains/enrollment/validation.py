# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Registration validation phase.

Pure checks over an :class:`EnrollmentContext`; nothing here touches the
store. Checks run in a fixed order and raise the first violation.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from registrar.domains.common import SectionInfo
from registrar.domains.course_state.evaluator import CourseStatus
from registrar.domains.credits.accountant import check_load, current_load, max_load
from registrar.domains.curriculum.repository import CurriculumCourseInfo
from registrar.domains.enrollment.context import EnrollmentContext
from registrar.domains.errors import (
    CorequisiteUnmet,
    CourseStateConflict,
    InvalidInput,
    MandatoryRepeatBlocked,
    NotFound,
    PrerequisiteUnmet,
    SeatNoLongerAvailable,
)
from registrar.domains.scheduling.conflicts import check_schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A section requested for registration, resolved to its course."""

    section: SectionInfo
    course: CurriculumCourseInfo


def validate_id_list(
    ids: Sequence[int],
    label: str = "section_ids",
    allow_empty: bool = False,
) -> list[int]:
    """Reject empty, non-positive or duplicate identifiers.

    Raises:
        InvalidInput: On the first malformed entry.
    """
    if not ids and not allow_empty:
        raise InvalidInput(f"{label} must not be empty")
    seen: set[int] = set()
    for value in ids:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidInput(f"{label} must contain positive integers, got {value!r}")
        if value in seen:
            raise InvalidInput(f"{label} contains duplicate id {value}")
        seen.add(value)
    return list(ids)


def resolve_candidates(
    ctx: EnrollmentContext,
    section_ids: Sequence[int],
    sections: Mapping[int, SectionInfo],
) -> list[Candidate]:
    """Map each section id to a section of the active period and its course.

    Raises:
        NotFound: If a section does not exist in the active period.
        InvalidInput: If a section's course is not in the curriculum.
    """
    candidates = []
    for section_id in section_ids:
        section = sections.get(section_id)
        if section is None or section.period_id != ctx.period.id:
            raise NotFound("section", section_id)
        course = ctx.curriculum.courses.get(section.course_id)
        if course is None:
            raise InvalidInput(
                f"Section {section_id} belongs to course {section.course_id}, "
                "which is not part of the student's curriculum"
            )
        candidates.append(Candidate(section=section, course=course))
    return candidates


def check_mandatory_freeze(ctx: EnrollmentContext) -> None:
    """Freeze registration while a mandatory repeat has no open seat anywhere."""
    for course in ctx.mandatory_courses():
        if course.course_id not in ctx.open_seat_courses:
            raise MandatoryRepeatBlocked(course.course_id)


def check_candidates(ctx: EnrollmentContext, candidates: Sequence[Candidate]) -> None:
    """Per-candidate state, duplication, semester and seat checks."""
    batch_course_ids = {c.course.course_id for c in candidates}
    blocking = [m for m in ctx.mandatory_courses() if m.course_id not in batch_course_ids]
    seen_courses: set[int] = set()

    for candidate in candidates:
        course_id = candidate.course.course_id
        state = ctx.state_of(course_id)

        if state.status in (CourseStatus.REGISTERED, CourseStatus.COMPLETED):
            raise CourseStateConflict(course_id, state.status.value)
        if state.status is CourseStatus.WAITING:
            missing = ctx.first_unmet_prerequisite(course_id)
            raise PrerequisiteUnmet(course_id, missing if missing is not None else course_id)
        if course_id in seen_courses:
            raise InvalidInput(f"More than one section requested for course {course_id}")
        seen_courses.add(course_id)

        for mandatory in blocking:
            if candidate.course.semester > mandatory.semester:
                raise MandatoryRepeatBlocked(mandatory.course_id)

        if candidate.section.seats_available <= 0:
            raise SeatNoLongerAvailable(candidate.section.id)


def check_requisites(
    ctx: EnrollmentContext,
    candidates: Sequence[Candidate],
    co_present: Iterable[int] = (),
) -> None:
    """Hard prerequisites must be completed; corequisites completed or co-present.

    Args:
        ctx: Enrollment snapshot.
        candidates: Resolved candidates.
        co_present: Extra course ids that satisfy corequisites besides the
            batch itself.
    """
    present = {c.course.course_id for c in candidates} | set(co_present)
    for candidate in candidates:
        course_id = candidate.course.course_id
        for required_id in ctx.curriculum.prerequisites_of(course_id):
            if not ctx.is_course_completed(required_id):
                raise PrerequisiteUnmet(course_id, required_id)
        for required_id in ctx.curriculum.corequisites_of(course_id):
            if not ctx.is_course_completed(required_id) and required_id not in present:
                raise CorequisiteUnmet(course_id, required_id)


def check_schedule_and_load(ctx: EnrollmentContext, candidates: Sequence[Candidate]) -> None:
    check_schedule([c.section for c in candidates], ctx.registered_sections)
    check_load(
        current=current_load(ctx.history, ctx.period.id),
        incoming=sum(c.course.credits for c in candidates),
        maximum=max_load(ctx.curriculum, ctx.student_semester),
    )


def validate_registration(
    ctx: EnrollmentContext,
    section_ids: Sequence[int],
    sections: Mapping[int, SectionInfo],
    co_present: Iterable[int] = (),
) -> list[Candidate]:
    """Run every registration check against the snapshot.

    Args:
        ctx: Enrollment snapshot.
        section_ids: Requested sections, already checked for shape.
        sections: Loaded sections keyed by id.
        co_present: Extra course ids satisfying corequisites.

    Returns:
        The resolved candidates, in request order.

    Raises:
        EnrollmentError: The first violated check.
    """
    candidates = resolve_candidates(ctx, section_ids, sections)
    check_mandatory_freeze(ctx)
    check_candidates(ctx, candidates)
    check_requisites(ctx, candidates, co_present)
    check_schedule_and_load(ctx, candidates)
    logger.debug(
        "Registration validated: student=%s, sections=%s",
        ctx.identity.student_id,
        [c.section.id for c in candidates],
    )
    return candidates
