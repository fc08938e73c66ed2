# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment transaction coordinator.

This module provides the EnrollmentService class for:
- Registering a batch of sections, all or nothing
- Withdrawing a registered attempt

A request first runs a validation phase that only reads. Only if every
check passes does it open the commit phase, which takes seats with a
conditional decrement and inserts the attempt rows in one transaction.
Losing a seat race rolls the whole batch back.
"""

import logging
from typing import Awaitable, Callable, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.core.config import Settings, get_settings
from registrar.domains.audit.sink import AuditSink, LoggingAuditSink, record_safely
from registrar.domains.common import Identity, Period
from registrar.domains.course_state.evaluator import CourseStatus, derive_state
from registrar.domains.curriculum.repository import CurriculumRepository
from registrar.domains.eligibility.calendar import PeriodCalendar, SqlPeriodCalendar
from registrar.domains.eligibility.documents import (
    DocumentStatusProvider,
    SqlDocumentStatusProvider,
)
from registrar.domains.eligibility.gate import EligibilityDecision, EligibilityGate
from registrar.domains.enrollment.context import EnrollmentContext, load_context
from registrar.domains.enrollment.sections import SectionRepository
from registrar.domains.enrollment.validation import (
    Candidate,
    validate_id_list,
    validate_registration,
)
from registrar.domains.errors import (
    CourseStateConflict,
    EnrollmentError,
    Internal,
    InvalidInput,
    NotFound,
    SeatNoLongerAvailable,
)
from registrar.domains.history.repository import AttemptSnapshot, HistoryRepository
from registrar.models.eligibility import DocumentStatusResponse, EligibilityResponse
from registrar.models.enrollment import (
    RegisteredSectionResponse,
    RegistrationResponse,
    WithdrawalResponse,
)

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Coordinates validation and the atomic registration commit.

    Collaborators default to the SQL implementations bound to ``db``; any
    of them can be injected instead.

    Attributes:
        db: Async database session owning the request's transaction.
        settings: Application settings.
        gate: Eligibility gate.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        *,
        calendar: PeriodCalendar | None = None,
        documents: DocumentStatusProvider | None = None,
        curricula: CurriculumRepository | None = None,
        history: HistoryRepository | None = None,
        sections: SectionRepository | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.calendar = calendar or SqlPeriodCalendar(db)
        self.documents = documents or SqlDocumentStatusProvider(db)
        self.curricula = curricula or CurriculumRepository(db)
        self.history = history or HistoryRepository(db)
        self.sections = sections or SectionRepository(db)
        self.audit = audit or LoggingAuditSink()
        self.gate = EligibilityGate(self.calendar, self.documents, self.curricula)

    @property
    def passing_score(self) -> float:
        return self.settings.enrollment.passing_score

    async def register(
        self,
        identity: Identity,
        section_ids: Sequence[int],
    ) -> RegistrationResponse:
        """Register a batch of sections in the active period.

        Args:
            identity: The student.
            section_ids: Sections to register, one per course.

        Returns:
            The committed registrations.

        Raises:
            InvalidInput: If the id list is malformed.
            NotEligible: If the eligibility gate denies registration.
            EnrollmentError: The first violated validation check, or
                SeatNoLongerAvailable if a seat race was lost.
        """
        ids = validate_id_list(section_ids)
        decision = await self.gate.check_registration_eligible(identity)
        decision.raise_for_denial()
        return await self.register_with_decision(
            identity, ids, decision, action="enrollment.register"
        )

    async def withdraw(self, identity: Identity, attempt_id: int) -> WithdrawalResponse:
        """Withdraw a registration while the registration or amendment window is open.

        Raises:
            NotEligible: If neither window is open.
            NotFound: If the attempt is not the student's active registration.
            CourseStateConflict: If the attempt is not registered or the
                course carries a repeat debt.
        """
        decision = await self.gate.check_withdrawal_eligible(identity)
        decision.raise_for_denial()
        return await self.withdraw_with_decision(
            identity, attempt_id, decision, action="enrollment.withdraw"
        )

    async def check_eligibility(self, identity: Identity, action: str) -> EligibilityResponse:
        """Report whether the student may perform an action category now.

        Args:
            identity: The student.
            action: One of ``registration``, ``amendment`` or ``withdrawal``.

        Raises:
            InvalidInput: If the action is unknown.
        """
        checks = {
            "registration": self.gate.check_registration_eligible,
            "amendment": self.gate.check_amendment_eligible,
            "withdrawal": self.gate.check_withdrawal_eligible,
        }
        if action not in checks:
            raise InvalidInput(f"Unknown action {action!r}")
        decision = await checks[action](identity)
        return EligibilityResponse(
            action=action,
            eligible=decision.ok,
            reason=decision.reason.value if decision.reason else None,
            period_id=decision.period.id if decision.period else None,
            period_label=decision.period.label if decision.period else None,
            documents=[
                DocumentStatusResponse(kind=d.kind, status=d.status) for d in decision.documents
            ],
        )

    async def load_context(
        self,
        identity: Identity,
        period: Period,
        curriculum_id: int,
    ) -> EnrollmentContext:
        return await load_context(
            identity,
            period,
            curriculum_id,
            curricula=self.curricula,
            history=self.history,
            sections=self.sections,
            passing_score=self.passing_score,
        )

    async def register_with_decision(
        self,
        identity: Identity,
        section_ids: Sequence[int],
        decision: EligibilityDecision,
        action: str,
    ) -> RegistrationResponse:
        """Validate and commit a registration after a passed gate check."""
        ctx = await self.load_context(identity, decision.period, decision.curriculum_id)
        sections = await self.sections.get_sections(section_ids)
        try:
            candidates = validate_registration(ctx, section_ids, sections)
        except EnrollmentError as e:
            logger.info(
                "Registration rejected: student=%s, kind=%s, %s",
                identity.student_id,
                e.kind,
                e.message,
            )
            raise

        attempt_ids = await self.apply_changes(identity.student_id, ctx.period.id, adds=candidates)
        response = self._registration_response(identity, ctx, candidates, attempt_ids)

        logger.info(
            "Registration committed: student=%s, period=%s, sections=%s",
            identity.student_id,
            ctx.period.id,
            [c.section.id for c in candidates],
        )
        await record_safely(
            self.audit,
            identity.student_id,
            action,
            {"period_id": ctx.period.id, "section_ids": list(section_ids)},
        )
        return response

    async def withdraw_with_decision(
        self,
        identity: Identity,
        attempt_id: int,
        decision: EligibilityDecision,
        action: str,
    ) -> WithdrawalResponse:
        """Validate and commit a withdrawal after a passed gate check."""
        period = decision.period
        attempt = await self.get_owned_registration(identity, attempt_id, period)
        history = await self.history.load_history(identity.student_id)
        self.check_withdrawal_debt(history, attempt, period)

        await self.apply_changes(identity.student_id, period.id, drops=[attempt])

        logger.info(
            "Withdrawal committed: student=%s, attempt=%s, section=%s",
            identity.student_id,
            attempt.id,
            attempt.section_id,
        )
        await record_safely(
            self.audit,
            identity.student_id,
            action,
            {"period_id": period.id, "attempt_id": attempt.id, "section_id": attempt.section_id},
        )
        return WithdrawalResponse(
            attempt_id=attempt.id,
            course_id=attempt.course_id,
            section_id=attempt.section_id,
            period_id=period.id,
        )

    async def get_owned_registration(
        self,
        identity: Identity,
        attempt_id: int,
        period: Period,
    ) -> AttemptSnapshot:
        """Get an attempt the student holds in the active period.

        Raises:
            NotFound: If missing, owned by someone else, or in another period.
            CourseStateConflict: If the attempt is no longer ``registered``.
        """
        attempt = await self.history.get_attempt(attempt_id)
        if (
            attempt is None
            or attempt.student_id != identity.student_id
            or attempt.period_id != period.id
        ):
            raise NotFound("attempt", attempt_id)
        if attempt.outcome != "registered":
            raise CourseStateConflict(attempt.course_id, attempt.outcome)
        return attempt

    def check_withdrawal_debt(
        self,
        history: Sequence[AttemptSnapshot],
        attempt: AttemptSnapshot,
        period: Period,
    ) -> None:
        """Refuse to withdraw a course the student owes a repeat of.

        The debt is judged on history outside the active period.

        Raises:
            CourseStateConflict: If the course is repeat-pending or repeat-mandatory.
        """
        past = [
            a for a in history if a.course_id == attempt.course_id and a.period_id != period.id
        ]
        state = derive_state(past, period, False, self.passing_score)
        if state.needs_repeat:
            logger.info(
                "Withdrawal rejected: student=%s, course=%s is %s",
                attempt.student_id,
                attempt.course_id,
                state.status.value,
            )
            raise CourseStateConflict(attempt.course_id, state.status.value)

    async def apply_changes(
        self,
        student_id: int,
        period_id: int,
        *,
        drops: Sequence[AttemptSnapshot] = (),
        adds: Sequence[Candidate] = (),
        before_commit: Callable[[], Awaitable[None]] | None = None,
    ) -> list[int]:
        """Commit drops and adds in one transaction.

        Dropped attempts give their seat back and are deleted; added
        candidates take a seat and get a ``registered`` attempt. Any failure
        rolls everything back.

        Args:
            student_id: The student.
            period_id: The active period.
            drops: Attempts to delete.
            adds: Candidates to register.
            before_commit: Extra write to run inside the same transaction.

        Returns:
            Ids of the inserted attempts, in candidate order.

        Raises:
            SeatNoLongerAvailable: If a conditional decrement matched no row.
            CourseStateConflict: If the student already holds the registration.
            Internal: On any other store failure.
        """
        try:
            for attempt in drops:
                if attempt.section_id is not None:
                    if not await self.sections.release_seat(attempt.section_id):
                        logger.error(
                            "Seat release failed: section=%s already at capacity",
                            attempt.section_id,
                        )
                        raise Internal()
                if not await self.history.delete_attempt(attempt.id):
                    raise NotFound("attempt", attempt.id)

            attempt_ids = []
            for candidate in adds:
                if not await self.sections.reserve_seat(candidate.section.id):
                    raise SeatNoLongerAvailable(candidate.section.id)
                try:
                    attempt_ids.append(
                        await self.history.insert_registered(
                            student_id,
                            candidate.course.course_id,
                            period_id,
                            candidate.section.id,
                        )
                    )
                except IntegrityError as e:
                    raise CourseStateConflict(
                        candidate.course.course_id, CourseStatus.REGISTERED.value
                    ) from e

            if before_commit is not None:
                await before_commit()
            await self.db.commit()
            return attempt_ids

        except EnrollmentError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(
                "Enrollment commit failed: student=%s, period=%s", student_id, period_id
            )
            raise Internal() from e

    def _registration_response(
        self,
        identity: Identity,
        ctx: EnrollmentContext,
        candidates: Sequence[Candidate],
        attempt_ids: Sequence[int],
    ) -> RegistrationResponse:
        registrations = [
            RegisteredSectionResponse(
                attempt_id=attempt_id,
                section_id=c.section.id,
                section_code=c.section.code,
                course_id=c.course.course_id,
                course_code=c.course.code,
                course_title=c.course.title,
                credits=c.course.credits,
            )
            for c, attempt_id in zip(candidates, attempt_ids)
        ]
        return RegistrationResponse(
            student_id=identity.student_id,
            period_id=ctx.period.id,
            registrations=registrations,
            total_credits=sum(r.credits for r in registrations),
        )
