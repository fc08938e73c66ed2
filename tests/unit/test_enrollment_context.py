# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the enrollment snapshot and the pure validation helpers."""

import pytest

from registrar.domains.common import Identity, Period, SectionInfo
from registrar.domains.course_state.evaluator import CourseStatus
from registrar.domains.curriculum.repository import CurriculumCourseInfo, CurriculumGraph
from registrar.domains.enrollment.context import EnrollmentContext
from registrar.domains.enrollment.validation import (
    check_requisites,
    resolve_candidates,
    validate_id_list,
)
from registrar.domains.errors import CorequisiteUnmet, InvalidInput
from registrar.domains.history.repository import AttemptSnapshot

PERIOD = Period(id=3, year=2024, term=2, is_active=True)


def snapshot(attempt_id, course_id, outcome, period=(3, 2024, 2), section_id=None, score=None):
    period_id, year, term = period
    return AttemptSnapshot(
        id=attempt_id,
        student_id=1,
        course_id=course_id,
        period_id=period_id,
        year=year,
        term=term,
        outcome=outcome,
        score=score,
        section_id=section_id,
        credits=3,
    )


@pytest.fixture
def graph() -> CurriculumGraph:
    return CurriculumGraph(
        curriculum_id=100,
        courses={
            1: CurriculumCourseInfo(1, "ENG101", "English", 3, 1),
            2: CurriculumCourseInfo(2, "BIO101", "Biology", 3, 1),
            3: CurriculumCourseInfo(3, "BIO102", "Biology Lab", 1, 1),
            4: CurriculumCourseInfo(4, "CHM101", "Chemistry", 3, 1),
            5: CurriculumCourseInfo(5, "BIO201", "Genetics", 3, 2),
        },
        prerequisites={5: [2]},
        corequisites={2: [3]},
    )


@pytest.fixture
def context(graph) -> EnrollmentContext:
    history = [
        snapshot(1, 4, "failed", period=(1, 2023, 2), score=1.0),
        snapshot(2, 4, "failed", period=(2, 2024, 1), score=2.0),
        snapshot(3, 1, "registered", section_id=11),
        snapshot(4, 3, "registered", section_id=31),
    ]
    sections = [
        SectionInfo(id=11, course_id=1, period_id=3, code="A", seats_max=5, seats_available=4),
        SectionInfo(id=31, course_id=3, period_id=3, code="L", seats_max=5, seats_available=4),
    ]
    return EnrollmentContext(
        identity=Identity(student_id=1, program_id=10, role="student"),
        period=PERIOD,
        curriculum=graph,
        student_semester=1,
        history=history,
        registered_sections=sections,
    )


class TestEnrollmentContext:
    def test_states_are_derived_for_every_course(self, context) -> None:
        assert context.state_of(1).status is CourseStatus.REGISTERED
        assert context.state_of(2).status is CourseStatus.ACTIVE
        assert context.state_of(4).status is CourseStatus.REPEAT_MANDATORY
        assert context.state_of(5).status is CourseStatus.WAITING

    def test_first_unmet_prerequisite(self, context) -> None:
        assert context.first_unmet_prerequisite(5) == 2
        assert context.first_unmet_prerequisite(2) is None

    def test_mandatory_courses(self, context) -> None:
        assert [c.code for c in context.mandatory_courses()] == ["CHM101"]

    def test_without_attempts_rederives_state(self, context) -> None:
        remaining = context.without_attempts([3])

        assert remaining.state_of(1).status is CourseStatus.ACTIVE
        assert [s.id for s in remaining.registered_sections] == [31]
        assert [a.id for a in remaining.registered] == [4]
        assert context.state_of(1).status is CourseStatus.REGISTERED


class TestValidationHelpers:
    def test_validate_id_list_allows_empty_when_asked(self) -> None:
        assert validate_id_list([], "drop_section_ids", allow_empty=True) == []

    def test_validate_id_list_names_the_field(self) -> None:
        with pytest.raises(InvalidInput) as exc_info:
            validate_id_list([], "add_section_ids")

        assert "add_section_ids" in exc_info.value.message

    def test_resolve_candidates_keeps_request_order(self, context) -> None:
        sections = {
            21: SectionInfo(id=21, course_id=2, period_id=3, code="B", seats_max=5,
                            seats_available=5),
            41: SectionInfo(id=41, course_id=4, period_id=3, code="C", seats_max=5,
                            seats_available=5),
        }

        candidates = resolve_candidates(context, [41, 21], sections)

        assert [c.course.code for c in candidates] == ["CHM101", "BIO101"]

    def test_corequisite_satisfied_by_co_present_course(self, context) -> None:
        sections = {
            21: SectionInfo(id=21, course_id=2, period_id=3, code="B", seats_max=5,
                            seats_available=5),
        }
        candidates = resolve_candidates(context, [21], sections)

        check_requisites(context, candidates, co_present={3})
        with pytest.raises(CorequisiteUnmet):
            check_requisites(context, candidates)
