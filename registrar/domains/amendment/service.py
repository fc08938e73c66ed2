# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Amendment service.

This module provides the AmendmentService class for:
- Direct adds and drops while the amendment window is open
- Submitting a queued add/drop request
- Reviewer approval, rejection and the pending queue
- Reviewer lookup of a student's current schedule

Approval re-validates the whole change against the current state and
applies it in a single transaction. If anything fails, the request stays
pending and no enrollment state changes.
"""

import logging
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.core.config import Settings, get_settings
from registrar.domains.amendment.repository import AmendmentRequestRepository
from registrar.domains.audit.sink import record_safely
from registrar.domains.catalog.service import CatalogService
from registrar.domains.common import EligibilityReason, Identity
from registrar.domains.enrollment.service import EnrollmentService
from registrar.domains.enrollment.validation import validate_id_list, validate_registration
from registrar.domains.errors import InvalidInput, NotEligible, NotFound
from registrar.infrastructure.database.models import AmendmentRequest
from registrar.models.amendment import AmendmentListResponse, AmendmentResponse
from registrar.models.catalog import ScheduleResponse
from registrar.models.enrollment import RegistrationResponse, WithdrawalResponse

logger = logging.getLogger(__name__)


class AmendmentService:
    """Amendment-window registration changes and the request workflow.

    Attributes:
        db: Async database session.
        settings: Application settings.
        enrollment: Coordinator used for validation and commits.
        requests: Amendment request repository.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        *,
        enrollment: EnrollmentService | None = None,
        requests: AmendmentRequestRepository | None = None,
    ) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.enrollment = enrollment or EnrollmentService(db, self.settings)
        self.requests = requests or AmendmentRequestRepository(db)

    async def add_sections(
        self,
        identity: Identity,
        section_ids: Sequence[int],
    ) -> RegistrationResponse:
        """Register sections under the amendment window. Documents are not checked."""
        ids = validate_id_list(section_ids)
        decision = await self.enrollment.gate.check_amendment_eligible(identity)
        decision.raise_for_denial()
        return await self.enrollment.register_with_decision(
            identity, ids, decision, action="amendment.add"
        )

    async def drop_section(self, identity: Identity, attempt_id: int) -> WithdrawalResponse:
        """Withdraw a registration under the amendment window."""
        decision = await self.enrollment.gate.check_amendment_eligible(identity)
        decision.raise_for_denial()
        return await self.enrollment.withdraw_with_decision(
            identity, attempt_id, decision, action="amendment.drop"
        )

    async def submit_amendment(
        self,
        identity: Identity,
        add_section_ids: Sequence[int],
        drop_section_ids: Sequence[int],
    ) -> AmendmentResponse:
        """Queue an add/drop request for reviewer approval.

        Args:
            identity: The student.
            add_section_ids: Sections to add.
            drop_section_ids: Currently registered sections to drop.

        Returns:
            The pending request.

        Raises:
            NotEligible: If the amendment window is closed.
            InvalidInput: If the lists are malformed, a drop does not match a
                registered section, or a pending request already exists.
        """
        decision = await self.enrollment.gate.check_amendment_eligible(identity)
        decision.raise_for_denial()
        period = decision.period

        adds = validate_id_list(add_section_ids, "add_section_ids", allow_empty=True)
        drops = validate_id_list(drop_section_ids, "drop_section_ids", allow_empty=True)
        if not adds and not drops:
            raise InvalidInput("An amendment must add or drop at least one section")
        overlap = set(adds) & set(drops)
        if overlap:
            raise InvalidInput(f"Sections cannot be both added and dropped: {sorted(overlap)}")

        history = await self.enrollment.history.load_history(identity.student_id)
        registered_sections = {
            a.section_id
            for a in history
            if a.outcome == "registered" and a.period_id == period.id
        }
        for section_id in drops:
            if section_id not in registered_sections:
                raise InvalidInput(f"Section {section_id} is not currently registered")

        if await self.requests.find_pending(identity.student_id, period.id) is not None:
            raise InvalidInput("A pending amendment request already exists for this period")

        try:
            request = await self.requests.create(
                identity.student_id, identity.program_id, period.id, adds, drops
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise InvalidInput(
                "A pending amendment request already exists for this period"
            ) from e

        logger.info(
            "Amendment submitted: request=%s, student=%s, adds=%s, drops=%s",
            request.id,
            identity.student_id,
            adds,
            drops,
        )
        await record_safely(
            self.enrollment.audit,
            identity.student_id,
            "amendment.submit",
            {"request_id": request.id, "add": adds, "drop": drops},
        )
        return AmendmentResponse.model_validate(request)

    async def approve_amendment(self, reviewer: Identity, request_id: int) -> AmendmentResponse:
        """Apply a pending request.

        Drops are re-checked for repeat debt; adds go through the full
        registration validation against the registrations left after the
        drops. The drops, the adds and the status change commit together.

        Raises:
            NotEligible: If the reviewer is not authorized or the request's
                period is no longer active.
            NotFound: If the request does not exist.
            InvalidInput: If the request is not pending or a drop no longer
                matches a registration.
            EnrollmentError: Any registration check failing for the adds.
        """
        request = await self._get_pending(reviewer, request_id)

        period = await self.enrollment.calendar.active_period()
        if period is None or period.id != request.period_id:
            raise NotEligible(EligibilityReason.NO_ACTIVE_PERIOD)

        student = Identity(
            student_id=request.student_id,
            program_id=request.program_id,
            role=self.settings.enrollment.student_role,
        )
        curriculum_id = await self.enrollment.curricula.get_curriculum_id(student.student_id)
        if curriculum_id is None:
            raise NotEligible(EligibilityReason.CURRICULUM_NOT_ASSIGNED)

        ctx = await self.enrollment.load_context(student, period, curriculum_id)
        registered_by_section = {a.section_id: a for a in ctx.registered}

        dropped = []
        for section_id in request.drop_section_ids:
            attempt = registered_by_section.get(section_id)
            if attempt is None:
                raise InvalidInput(f"Section {section_id} is no longer registered")
            self.enrollment.check_withdrawal_debt(ctx.history, attempt, period)
            dropped.append(attempt)

        remaining = ctx.without_attempts(a.id for a in dropped)
        candidates = []
        if request.add_section_ids:
            sections = await self.enrollment.sections.get_sections(request.add_section_ids)
            candidates = validate_registration(
                remaining,
                request.add_section_ids,
                sections,
                co_present={a.course_id for a in remaining.registered},
            )

        async def mark_approved() -> None:
            await self.requests.set_status(request, "approved", reviewer.student_id)

        await self.enrollment.apply_changes(
            student.student_id,
            period.id,
            drops=dropped,
            adds=candidates,
            before_commit=mark_approved,
        )

        logger.info(
            "Amendment approved: request=%s, student=%s, reviewer=%s",
            request.id,
            student.student_id,
            reviewer.student_id,
        )
        await record_safely(
            self.enrollment.audit,
            reviewer.student_id,
            "amendment.approve",
            {"request_id": request.id, "student_id": student.student_id},
        )
        return AmendmentResponse.model_validate(request)

    async def reject_amendment(
        self,
        reviewer: Identity,
        request_id: int,
        note: str | None = None,
    ) -> AmendmentResponse:
        """Reject a pending request without touching enrollment state."""
        request = await self._get_pending(reviewer, request_id)
        await self.requests.set_status(request, "rejected", reviewer.student_id, note)
        await self.db.commit()

        logger.info("Amendment rejected: request=%s, reviewer=%s", request.id, reviewer.student_id)
        await record_safely(
            self.enrollment.audit,
            reviewer.student_id,
            "amendment.reject",
            {"request_id": request.id, "note": note},
        )
        return AmendmentResponse.model_validate(request)

    async def list_pending_amendments(
        self,
        reviewer: Identity,
        program_id: int | None = None,
    ) -> AmendmentListResponse:
        """List pending requests of a program, oldest first.

        Args:
            reviewer: The reviewer.
            program_id: Program to list; defaults to the reviewer's own.
        """
        self._authorize(reviewer)
        requests = await self.requests.list_pending(program_id or reviewer.program_id)
        items = [AmendmentResponse.model_validate(r) for r in requests]
        return AmendmentListResponse(items=items, total=len(items))

    async def get_student_schedule(self, reviewer: Identity, student_id: int) -> ScheduleResponse:
        """A student's registrations in the active period, for reviewers.

        Raises:
            NotEligible: If the caller is not a reviewer or no period is active.
        """
        self._authorize(reviewer)
        logger.info(
            "Schedule lookup: reviewer=%s, student=%s", reviewer.student_id, student_id
        )
        return await CatalogService(self.enrollment).schedule_for(student_id)

    def _authorize(self, reviewer: Identity) -> None:
        if reviewer.role not in self.settings.enrollment.reviewer_roles:
            logger.info(
                "Amendment review denied: user=%s, role=%s", reviewer.student_id, reviewer.role
            )
            raise NotEligible(EligibilityReason.REVIEWER_NOT_AUTHORIZED)

    async def _get_pending(self, reviewer: Identity, request_id: int) -> AmendmentRequest:
        self._authorize(reviewer)
        request = await self.requests.get(request_id)
        if request is None:
            raise NotFound("amendment_request", request_id)
        if request.status != "pending":
            raise InvalidInput(f"Amendment request {request_id} is already {request.status}")
        return request
