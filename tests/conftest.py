# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- An in-memory store standing in for the relational store
- Fake repositories bound to per-request fake sessions
- Service factories wired to those fakes
"""

import asyncio
from dataclasses import replace
from types import SimpleNamespace
from typing import Callable
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from registrar.core.config import Settings, clear_settings_cache
from registrar.domains.amendment.service import AmendmentService
from registrar.domains.catalog.service import CatalogService
from registrar.domains.common import (
    DocumentStatus,
    Identity,
    Meeting,
    Period,
    SectionInfo,
    Window,
)
from registrar.domains.curriculum.repository import CurriculumCourseInfo, CurriculumGraph
from registrar.domains.enrollment.service import EnrollmentService
from registrar.domains.errors import NotFound
from registrar.domains.history.repository import AttemptSnapshot
from registrar.utils.datetime import utc_now

STUDENT_ID = 1
PROGRAM_ID = 10
CURRICULUM_ID = 100


# =============================================================================
# In-memory store
# =============================================================================


class InMemoryStore:
    """Shared state behind the fake repositories.

    Seat counters and attempts are mutated only through fake sessions so
    that rollback can undo them.
    """

    def __init__(self) -> None:
        self.periods: dict[int, Period] = {}
        self.active_period_id: int | None = None
        self.windows: dict[tuple[int, int], Window] = {}
        self.window_inserts = 0
        self.documents: dict[tuple[int, int], list[DocumentStatus]] = {}
        self.graphs: dict[int, CurriculumGraph] = {}
        self.assignments: dict[int, int] = {}
        self.semesters: dict[int, int] = {}
        self.sections: dict[int, SectionInfo] = {}
        self.seats: dict[int, int] = {}
        self.attempts: dict[int, AttemptSnapshot] = {}
        self.requests: dict[int, SimpleNamespace] = {}
        self._next_id = 1000

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    # -- builders -------------------------------------------------------------

    def add_period(self, period_id: int, year: int, term: int, active: bool = False) -> Period:
        period = Period(id=period_id, year=year, term=term, is_active=active)
        self.periods[period_id] = period
        if active:
            self.active_period_id = period_id
        return period

    def set_window(self, period_id: int, program_id: int = PROGRAM_ID, **flags: bool) -> None:
        self.windows[(period_id, program_id)] = Window(
            period_id=period_id, program_id=program_id, **flags
        )

    def assign(self, student_id: int = STUDENT_ID, curriculum_id: int = CURRICULUM_ID,
               semester: int = 1) -> None:
        self.assignments[student_id] = curriculum_id
        self.semesters[student_id] = semester
        self.graphs.setdefault(curriculum_id, CurriculumGraph(curriculum_id=curriculum_id))

    def add_course(
        self,
        course_id: int,
        code: str,
        credits: int = 3,
        semester: int = 1,
        curriculum_id: int = CURRICULUM_ID,
        prerequisites: tuple[int, ...] = (),
        corequisites: tuple[int, ...] = (),
    ) -> CurriculumCourseInfo:
        graph = self.graphs.setdefault(curriculum_id, CurriculumGraph(curriculum_id=curriculum_id))
        course = CurriculumCourseInfo(
            course_id=course_id,
            code=code,
            title=f"Course {code}",
            credits=credits,
            semester=semester,
        )
        graph.courses[course_id] = course
        if prerequisites:
            graph.prerequisites[course_id] = list(prerequisites)
        if corequisites:
            graph.corequisites[course_id] = list(corequisites)
        return course

    def set_cap(self, semester: int, max_credits: int | None,
                curriculum_id: int = CURRICULUM_ID) -> None:
        self.graphs[curriculum_id].credit_caps[semester] = max_credits

    def add_section(
        self,
        section_id: int,
        course_id: int,
        seats: int = 30,
        seats_max: int | None = None,
        period_id: int | None = None,
        meetings: tuple[tuple[str, str, str], ...] = (),
    ) -> SectionInfo:
        section = SectionInfo(
            id=section_id,
            course_id=course_id,
            period_id=period_id if period_id is not None else self.active_period_id,
            code=f"S{section_id}",
            seats_max=seats_max if seats_max is not None else max(seats, 1),
            seats_available=seats,
            instructor="Staff",
            meetings=tuple(Meeting(day=d, starts_at=s, ends_at=e) for d, s, e in meetings),
        )
        self.sections[section_id] = section
        self.seats[section_id] = seats
        return section

    def add_attempt(
        self,
        course_id: int,
        period_id: int,
        outcome: str,
        score: float | None = None,
        section_id: int | None = None,
        student_id: int = STUDENT_ID,
    ) -> AttemptSnapshot:
        attempt_id = self.next_id()
        attempt = self._snapshot(attempt_id, student_id, course_id, period_id, outcome,
                                 score, section_id)
        self.attempts[attempt_id] = attempt
        return attempt

    def add_document(self, kind: str, status: str, student_id: int = STUDENT_ID,
                     period_id: int | None = None) -> None:
        key = (student_id, period_id or self.active_period_id)
        self.documents.setdefault(key, []).append(DocumentStatus(kind=kind, status=status))

    # -- queries used by tests --------------------------------------------------

    def registered(self, student_id: int = STUDENT_ID) -> list[AttemptSnapshot]:
        return [
            a for a in self.attempts.values()
            if a.student_id == student_id
            and a.outcome == "registered"
            and a.period_id == self.active_period_id
        ]

    def credits_of(self, course_id: int) -> int:
        for graph in self.graphs.values():
            if course_id in graph.courses:
                return graph.courses[course_id].credits
        return 0

    def _snapshot(self, attempt_id, student_id, course_id, period_id, outcome, score,
                  section_id) -> AttemptSnapshot:
        period = self.periods[period_id]
        return AttemptSnapshot(
            id=attempt_id,
            student_id=student_id,
            course_id=course_id,
            period_id=period_id,
            year=period.year,
            term=period.term,
            outcome=outcome,
            score=score,
            section_id=section_id,
            credits=self.credits_of(course_id),
        )


class FakeSession:
    """Unit of work over the store: writes are journaled until commit."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self._undo: list[Callable[[], None]] = []
        self.commits = 0
        self.rollbacks = 0

    def journal(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    async def commit(self) -> None:
        self._undo.clear()
        self.commits += 1

    async def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()
        self.rollbacks += 1


class FakeCalendar:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def active_period(self) -> Period | None:
        await asyncio.sleep(0)
        if self.store.active_period_id is None:
            return None
        return self.store.periods[self.store.active_period_id]

    async def window(self, period_id: int, program_id: int) -> Window:
        await asyncio.sleep(0)
        key = (period_id, program_id)
        if key not in self.store.windows:
            self.store.windows[key] = Window(period_id=period_id, program_id=program_id)
            self.store.window_inserts += 1
        return self.store.windows[key]


class FakeDocuments:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def document_statuses(self, student_id: int, period_id: int) -> list[DocumentStatus]:
        return list(self.store.documents.get((student_id, period_id), []))


class FakeCurricula:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_curriculum_id(self, student_id: int) -> int | None:
        return self.store.assignments.get(student_id)

    async def get_student_semester(self, student_id: int) -> int:
        if student_id not in self.store.semesters:
            raise NotFound("student", student_id)
        return self.store.semesters[student_id]

    async def load_graph(self, curriculum_id: int) -> CurriculumGraph:
        await asyncio.sleep(0)
        return self.store.graphs[curriculum_id]


class FakeHistory:
    def __init__(self, store: InMemoryStore, session: FakeSession) -> None:
        self.store = store
        self.session = session

    async def load_history(self, student_id: int) -> list[AttemptSnapshot]:
        await asyncio.sleep(0)
        attempts = [a for a in self.store.attempts.values() if a.student_id == student_id]
        return sorted(attempts, key=lambda a: (a.ordinal, a.id))

    async def get_attempt(self, attempt_id: int) -> AttemptSnapshot | None:
        return self.store.attempts.get(attempt_id)

    async def insert_registered(self, student_id: int, course_id: int, period_id: int,
                                section_id: int) -> int:
        for a in self.store.attempts.values():
            if (a.student_id, a.course_id, a.period_id, a.outcome) == (
                student_id, course_id, period_id, "registered"
            ):
                raise IntegrityError("INSERT INTO attempt_records", {}, Exception("duplicate"))
        attempt_id = self.store.next_id()
        self.store.attempts[attempt_id] = self.store._snapshot(
            attempt_id, student_id, course_id, period_id, "registered", None, section_id
        )
        self.session.journal(lambda: self.store.attempts.pop(attempt_id, None))
        return attempt_id

    async def delete_attempt(self, attempt_id: int) -> bool:
        attempt = self.store.attempts.get(attempt_id)
        if attempt is None or attempt.outcome != "registered":
            return False
        del self.store.attempts[attempt_id]
        self.session.journal(lambda: self.store.attempts.__setitem__(attempt_id, attempt))
        return True


class FakeSections:
    def __init__(self, store: InMemoryStore, session: FakeSession) -> None:
        self.store = store
        self.session = session

    def _current(self, section_id: int) -> SectionInfo:
        return replace(
            self.store.sections[section_id], seats_available=self.store.seats[section_id]
        )

    async def get_sections(self, section_ids) -> dict[int, SectionInfo]:
        await asyncio.sleep(0)
        return {i: self._current(i) for i in section_ids if i in self.store.sections}

    async def list_for_courses(self, period_id: int, course_ids) -> list[SectionInfo]:
        ids = set(course_ids)
        return [
            self._current(s.id)
            for s in sorted(self.store.sections.values(), key=lambda s: (s.course_id, s.code))
            if s.period_id == period_id and s.course_id in ids
        ]

    async def courses_with_open_seats(self, period_id: int, course_ids) -> set[int]:
        ids = set(course_ids)
        return {
            s.course_id
            for s in self.store.sections.values()
            if s.period_id == period_id and s.course_id in ids and self.store.seats[s.id] > 0
        }

    async def reserve_seat(self, section_id: int) -> bool:
        # Check and decrement without yielding, like a single UPDATE statement.
        if self.store.seats.get(section_id, 0) <= 0:
            return False
        self.store.seats[section_id] -= 1
        self.session.journal(lambda: self.store.seats.__setitem__(
            section_id, self.store.seats[section_id] + 1
        ))
        return True

    async def release_seat(self, section_id: int) -> bool:
        section = self.store.sections[section_id]
        if self.store.seats[section_id] >= section.seats_max:
            return False
        self.store.seats[section_id] += 1
        self.session.journal(lambda: self.store.seats.__setitem__(
            section_id, self.store.seats[section_id] - 1
        ))
        return True


class FakeAmendmentRequests:
    def __init__(self, store: InMemoryStore, session: FakeSession) -> None:
        self.store = store
        self.session = session

    async def get(self, request_id: int) -> SimpleNamespace | None:
        return self.store.requests.get(request_id)

    async def find_pending(self, student_id: int, period_id: int) -> SimpleNamespace | None:
        for r in self.store.requests.values():
            if (r.student_id, r.period_id, r.status) == (student_id, period_id, "pending"):
                return r
        return None

    async def list_pending(self, program_id: int) -> list[SimpleNamespace]:
        return [
            r for r in sorted(self.store.requests.values(), key=lambda r: r.id)
            if r.program_id == program_id and r.status == "pending"
        ]

    async def create(self, student_id, program_id, period_id, add_section_ids,
                     drop_section_ids) -> SimpleNamespace:
        request = SimpleNamespace(
            id=self.store.next_id(),
            student_id=student_id,
            program_id=program_id,
            period_id=period_id,
            add_section_ids=list(add_section_ids),
            drop_section_ids=list(drop_section_ids),
            status="pending",
            reviewer_id=None,
            review_note=None,
            submitted_at=utc_now(),
            reviewed_at=None,
        )
        self.store.requests[request.id] = request
        self.session.journal(lambda: self.store.requests.pop(request.id, None))
        return request

    async def set_status(self, request, status, reviewer_id, note=None, reviewed_at=None):
        previous = (request.status, request.reviewer_id, request.review_note, request.reviewed_at)
        request.status = status
        request.reviewer_id = reviewer_id
        request.review_note = note
        request.reviewed_at = reviewed_at or utc_now()

        def undo() -> None:
            (request.status, request.reviewer_id, request.review_note,
             request.reviewed_at) = previous

        self.session.journal(undo)
        return request


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    """Never leak cached settings between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="development")


@pytest.fixture
def store() -> InMemoryStore:
    """A store with an open registration window in period 2024-2.

    Periods: 2023-2 (id 1), 2024-1 (id 2), 2024-2 (id 3, active).
    Student 1 of program 10 is assigned curriculum 100 and has one
    approved document for the active period.
    """
    s = InMemoryStore()
    s.add_period(1, 2023, 2)
    s.add_period(2, 2024, 1)
    s.add_period(3, 2024, 2, active=True)
    s.set_window(3, registration_open=True)
    s.assign(semester=1)
    s.add_document("id_card", "approved")
    return s


@pytest.fixture
def audit() -> AsyncMock:
    sink = AsyncMock()
    sink.record = AsyncMock()
    return sink


@pytest.fixture
def identity() -> Identity:
    return Identity(student_id=STUDENT_ID, program_id=PROGRAM_ID, role="student")


@pytest.fixture
def reviewer() -> Identity:
    return Identity(student_id=900, program_id=PROGRAM_ID, role="department_head")


@pytest.fixture
def enrollment_factory(store, settings, audit) -> Callable[[], EnrollmentService]:
    """Build an EnrollmentService over a new fake session per call."""

    def build() -> EnrollmentService:
        session = FakeSession(store)
        return EnrollmentService(
            session,
            settings,
            calendar=FakeCalendar(store),
            documents=FakeDocuments(store),
            curricula=FakeCurricula(store),
            history=FakeHistory(store, session),
            sections=FakeSections(store, session),
            audit=audit,
        )

    return build


@pytest.fixture
def enrollment_service(enrollment_factory) -> EnrollmentService:
    return enrollment_factory()


@pytest.fixture
def amendment_service(store, settings, enrollment_service) -> AmendmentService:
    return AmendmentService(
        enrollment_service.db,
        settings,
        enrollment=enrollment_service,
        requests=FakeAmendmentRequests(store, enrollment_service.db),
    )


@pytest.fixture
def amendment_factory(store, settings, enrollment_factory) -> Callable[[], AmendmentService]:
    """Build an AmendmentService sharing one new fake session per call."""

    def build() -> AmendmentService:
        enrollment = enrollment_factory()
        return AmendmentService(
            enrollment.db,
            settings,
            enrollment=enrollment,
            requests=FakeAmendmentRequests(store, enrollment.db),
        )

    return build


@pytest.fixture
def catalog_service(enrollment_service) -> CatalogService:
    return CatalogService(enrollment_service)



# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (HTTP surface)"
    )
