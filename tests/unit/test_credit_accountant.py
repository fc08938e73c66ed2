# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for credit load accounting."""

import pytest

from registrar.domains.credits.accountant import check_load, current_load, max_load
from registrar.domains.curriculum.repository import CurriculumCourseInfo, CurriculumGraph
from registrar.domains.errors import CreditLimitExceeded
from registrar.domains.history.repository import AttemptSnapshot


@pytest.fixture
def graph() -> CurriculumGraph:
    courses = {
        1: CurriculumCourseInfo(1, "MAT101", "Calculus I", 4, 1),
        2: CurriculumCourseInfo(2, "PHY101", "Physics I", 3, 1),
        3: CurriculumCourseInfo(3, "MAT201", "Calculus II", 4, 2),
    }
    return CurriculumGraph(curriculum_id=1, courses=courses)


def registered(course_id: int, period_id: int, credits: int, outcome: str = "registered"):
    return AttemptSnapshot(
        id=course_id * 100 + period_id,
        student_id=1,
        course_id=course_id,
        period_id=period_id,
        year=2024,
        term=1,
        outcome=outcome,
        credits=credits,
    )


class TestCurrentLoad:
    def test_sums_registered_in_period_only(self) -> None:
        attempts = [
            registered(1, 5, 4),
            registered(2, 5, 3),
            registered(3, 4, 4),
            registered(3, 5, 4, outcome="failed"),
        ]

        assert current_load(attempts, 5) == 7

    def test_empty(self) -> None:
        assert current_load([], 5) == 0


class TestMaxLoad:
    def test_explicit_cap_wins(self, graph) -> None:
        graph.credit_caps[1] = 20

        assert max_load(graph, 1) == 20

    def test_falls_back_to_semester_credits(self, graph) -> None:
        assert max_load(graph, 1) == 7

    def test_null_cap_falls_back(self, graph) -> None:
        graph.credit_caps[2] = None

        assert max_load(graph, 2) == 4

    def test_semester_without_courses_is_zero(self, graph) -> None:
        assert max_load(graph, 9) == 0


class TestCheckLoad:
    def test_exactly_at_limit_passes(self) -> None:
        check_load(current=6, incoming=4, maximum=10)

    def test_over_limit_raises_with_detail(self) -> None:
        with pytest.raises(CreditLimitExceeded) as exc_info:
            check_load(current=6, incoming=5, maximum=10)

        assert exc_info.value.detail == {"current": 6, "incoming": 5, "maximum": 10}
