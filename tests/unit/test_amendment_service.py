# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the amendment workflow."""

import pytest

from registrar.domains.common import Identity
from registrar.domains.errors import (
    CorequisiteUnmet,
    CourseStateConflict,
    InvalidInput,
    NotEligible,
    NotFound,
    SeatNoLongerAvailable,
)


@pytest.fixture
def amendment_window(store):
    """Semester 1 courses with an open amendment window and one registration.

    The student holds MAT101 (section 11). PHY101 needs LAB101 alongside.
    """
    store.set_window(3, amendment_open=True)
    store.add_course(1, "MAT101", credits=4, semester=1)
    store.add_course(2, "PHY101", credits=3, semester=1, corequisites=(3,))
    store.add_course(3, "LAB101", credits=1, semester=1)
    store.add_course(6, "HIS101", credits=2, semester=1)
    store.set_cap(1, 12)
    store.add_section(11, 1, seats=4, seats_max=5, meetings=(("monday", "08:00", "10:00"),))
    store.add_section(12, 1, seats=5, meetings=(("wednesday", "08:00", "10:00"),))
    store.add_section(21, 2, seats=5, meetings=(("tuesday", "08:00", "10:00"),))
    store.add_section(31, 3, seats=5, meetings=(("tuesday", "10:00", "12:00"),))
    store.add_section(61, 6, seats=5, meetings=(("monday", "09:00", "10:30"),))
    store.add_section(62, 6, seats=5, meetings=(("thursday", "09:00", "10:30"),))
    store.registration = store.add_attempt(1, period_id=3, outcome="registered", section_id=11)
    return store


class TestDirectChanges:
    @pytest.mark.asyncio
    async def test_add_sections_skips_documents(
        self, amendment_service, amendment_window, identity, audit
    ) -> None:
        amendment_window.add_document("transcript", "rejected")

        response = await amendment_service.add_sections(identity, [62])

        assert response.registrations[0].course_code == "HIS101"
        assert amendment_window.seats[62] == 4
        assert audit.record.await_args.args[1] == "amendment.add"

    @pytest.mark.asyncio
    async def test_add_sections_requires_amendment_window(
        self, amendment_service, amendment_window, identity
    ) -> None:
        amendment_window.set_window(3, registration_open=True)

        with pytest.raises(NotEligible) as exc_info:
            await amendment_service.add_sections(identity, [62])

        assert exc_info.value.reason.value == "WindowClosed"

    @pytest.mark.asyncio
    async def test_add_sections_runs_registration_checks(
        self, amendment_service, amendment_window, identity
    ) -> None:
        with pytest.raises(CorequisiteUnmet):
            await amendment_service.add_sections(identity, [21])

    @pytest.mark.asyncio
    async def test_drop_section(self, amendment_service, amendment_window, identity) -> None:
        response = await amendment_service.drop_section(identity, amendment_window.registration.id)

        assert response.course_id == 1
        assert amendment_window.seats[11] == 5
        assert amendment_window.registered() == []


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_creates_pending_request(
        self, amendment_service, amendment_window, identity
    ) -> None:
        response = await amendment_service.submit_amendment(identity, [12], [11])

        assert response.status == "pending"
        assert response.add_section_ids == [12]
        assert response.drop_section_ids == [11]
        assert response.program_id == 10
        assert amendment_window.seats[12] == 5
        assert amendment_window.seats[11] == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "adds,drops",
        [([], []), ([12, 12], []), ([0], []), ([12], [12]), ([], [-1])],
    )
    async def test_submit_rejects_malformed_lists(
        self, amendment_service, amendment_window, identity, adds, drops
    ) -> None:
        with pytest.raises(InvalidInput):
            await amendment_service.submit_amendment(identity, adds, drops)

        assert amendment_window.requests == {}

    @pytest.mark.asyncio
    async def test_submit_drop_must_be_registered(
        self, amendment_service, amendment_window, identity
    ) -> None:
        with pytest.raises(InvalidInput):
            await amendment_service.submit_amendment(identity, [], [21])

    @pytest.mark.asyncio
    async def test_second_pending_request_rejected(
        self, amendment_service, amendment_window, identity
    ) -> None:
        await amendment_service.submit_amendment(identity, [62], [])

        with pytest.raises(InvalidInput):
            await amendment_service.submit_amendment(identity, [61], [])

        assert len(amendment_window.requests) == 1

    @pytest.mark.asyncio
    async def test_submit_requires_amendment_window(
        self, amendment_service, amendment_window, identity
    ) -> None:
        amendment_window.set_window(3)

        with pytest.raises(NotEligible):
            await amendment_service.submit_amendment(identity, [62], [])


class TestReview:
    @pytest.mark.asyncio
    async def test_student_cannot_review(
        self, amendment_service, amendment_window, identity
    ) -> None:
        request = await amendment_service.submit_amendment(identity, [62], [])

        with pytest.raises(NotEligible) as exc_info:
            await amendment_service.approve_amendment(identity, request.id)

        assert exc_info.value.detail["reason"] == "ReviewerNotAuthorized"

    @pytest.mark.asyncio
    async def test_unknown_request(self, amendment_service, amendment_window, reviewer) -> None:
        with pytest.raises(NotFound):
            await amendment_service.approve_amendment(reviewer, 5150)

    @pytest.mark.asyncio
    async def test_approve_swaps_sections(
        self, amendment_service, amendment_window, identity, reviewer, audit
    ) -> None:
        request = await amendment_service.submit_amendment(identity, [12], [11])

        response = await amendment_service.approve_amendment(reviewer, request.id)

        assert response.status == "approved"
        assert response.reviewer_id == reviewer.student_id
        assert amendment_window.seats[11] == 5
        assert amendment_window.seats[12] == 4
        assert [a.section_id for a in amendment_window.registered()] == [12]
        assert audit.record.await_args.args[:2] == (900, "amendment.approve")

    @pytest.mark.asyncio
    async def test_approve_ignores_window_and_documents(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        request = await amendment_service.submit_amendment(identity, [62], [])
        amendment_window.set_window(3)
        amendment_window.documents.clear()

        response = await amendment_service.approve_amendment(reviewer, request.id)

        assert response.status == "approved"

    @pytest.mark.asyncio
    async def test_dropped_section_frees_schedule_slot(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        # 61 overlaps the registered section 11, which is dropped in the same request.
        request = await amendment_service.submit_amendment(identity, [61], [11])

        await amendment_service.approve_amendment(reviewer, request.id)

        assert [a.section_id for a in amendment_window.registered()] == [61]

    @pytest.mark.asyncio
    async def test_corequisite_dropped_in_same_request_is_not_present(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        amendment_window.add_attempt(3, period_id=3, outcome="registered", section_id=31)
        request = await amendment_service.submit_amendment(identity, [21], [31])

        with pytest.raises(CorequisiteUnmet):
            await amendment_service.approve_amendment(reviewer, request.id)

        assert amendment_window.requests[request.id].status == "pending"
        assert {a.section_id for a in amendment_window.registered()} == {11, 31}

    @pytest.mark.asyncio
    async def test_registered_corequisite_counts_as_present(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        amendment_window.add_attempt(3, period_id=3, outcome="registered", section_id=31)
        request = await amendment_service.submit_amendment(identity, [21], [])

        response = await amendment_service.approve_amendment(reviewer, request.id)

        assert response.status == "approved"

    @pytest.mark.asyncio
    async def test_failed_approval_leaves_request_pending(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        request = await amendment_service.submit_amendment(identity, [12], [11])
        amendment_window.seats[12] = 0

        with pytest.raises(SeatNoLongerAvailable):
            await amendment_service.approve_amendment(reviewer, request.id)

        assert amendment_window.requests[request.id].status == "pending"
        assert amendment_window.seats[11] == 4
        assert [a.section_id for a in amendment_window.registered()] == [11]

    @pytest.mark.asyncio
    async def test_drop_with_repeat_debt_refused(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        amendment_window.add_attempt(1, period_id=2, outcome="failed", score=2.0)
        request = await amendment_service.submit_amendment(identity, [], [11])

        with pytest.raises(CourseStateConflict):
            await amendment_service.approve_amendment(reviewer, request.id)

    @pytest.mark.asyncio
    async def test_drop_no_longer_registered(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        request = await amendment_service.submit_amendment(identity, [], [11])
        del amendment_window.attempts[amendment_window.registration.id]

        with pytest.raises(InvalidInput):
            await amendment_service.approve_amendment(reviewer, request.id)

    @pytest.mark.asyncio
    async def test_period_no_longer_active(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        request = await amendment_service.submit_amendment(identity, [62], [])
        amendment_window.add_period(4, 2025, 1, active=True)

        with pytest.raises(NotEligible) as exc_info:
            await amendment_service.approve_amendment(reviewer, request.id)

        assert exc_info.value.reason.value == "NoActivePeriod"

    @pytest.mark.asyncio
    async def test_reject(self, amendment_service, amendment_window, identity, reviewer) -> None:
        request = await amendment_service.submit_amendment(identity, [12], [11])

        response = await amendment_service.reject_amendment(reviewer, request.id, "Section full")

        assert response.status == "rejected"
        assert response.review_note == "Section full"
        assert [a.section_id for a in amendment_window.registered()] == [11]

        with pytest.raises(InvalidInput):
            await amendment_service.approve_amendment(reviewer, request.id)

    @pytest.mark.asyncio
    async def test_list_pending(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        await amendment_service.submit_amendment(identity, [62], [])
        amendment_window.assign(student_id=2)
        other = Identity(student_id=2, program_id=10, role="student")
        second = await amendment_service.submit_amendment(other, [12], [])
        await amendment_service.reject_amendment(reviewer, second.id)

        listing = await amendment_service.list_pending_amendments(reviewer)

        assert listing.total == 1
        assert listing.items[0].student_id == 1

    @pytest.mark.asyncio
    async def test_list_other_program_is_empty(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        await amendment_service.submit_amendment(identity, [62], [])

        listing = await amendment_service.list_pending_amendments(reviewer, program_id=99)

        assert listing.total == 0


class TestStudentScheduleLookup:
    @pytest.mark.asyncio
    async def test_reviewer_sees_student_registrations(
        self, amendment_service, amendment_window, reviewer
    ) -> None:
        schedule = await amendment_service.get_student_schedule(reviewer, 1)

        assert schedule.student_id == 1
        assert schedule.period_id == 3
        assert [e.section_id for e in schedule.entries] == [11]
        assert schedule.entries[0].course_code == "MAT101"
        assert schedule.total_credits == 4

    @pytest.mark.asyncio
    async def test_pending_request_does_not_change_schedule(
        self, amendment_service, amendment_window, identity, reviewer
    ) -> None:
        await amendment_service.submit_amendment(identity, [62], [11])

        schedule = await amendment_service.get_student_schedule(reviewer, 1)

        assert [e.section_id for e in schedule.entries] == [11]

    @pytest.mark.asyncio
    async def test_student_cannot_view_schedules(
        self, amendment_service, amendment_window, identity
    ) -> None:
        with pytest.raises(NotEligible) as exc_info:
            await amendment_service.get_student_schedule(identity, 1)

        assert exc_info.value.reason.value == "ReviewerNotAuthorized"

    @pytest.mark.asyncio
    async def test_unknown_student_has_empty_schedule(
        self, amendment_service, amendment_window, reviewer
    ) -> None:
        schedule = await amendment_service.get_student_schedule(reviewer, 404)

        assert schedule.entries == []
        assert schedule.total_credits == 0
