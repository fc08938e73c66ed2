# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Eligibility gate.

Composes curriculum assignment, the active period, the enrollment window
and evidence-document approval into one permit/deny decision. Every
mutating operation consults the gate first. Checks run in a fixed order
and the first failure wins:

1. the student has a curriculum assignment;
2. an active, non-archived period exists;
3. the (period, program) window exists, created lazily if missing;
4. the relevant window gate is open;
5. for registration only, at least one evidence document exists for the
   period and every document is approved.
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from registrar.domains.common import (
    DocumentStatus,
    EligibilityReason,
    Identity,
    Period,
    Window,
    WindowGate,
)
from registrar.domains.curriculum.repository import CurriculumRepository
from registrar.domains.eligibility.calendar import PeriodCalendar
from registrar.domains.eligibility.documents import DocumentStatusProvider
from registrar.domains.errors import NotEligible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityDecision:
    """Outcome of an eligibility check.

    Attributes:
        ok: True when the request may proceed.
        reason: Denial reason when not ok.
        period: The active period, when one exists.
        window: The window flags, when they were read.
        curriculum_id: The student's curriculum, when assigned.
        documents: Offending documents for ``DocumentsIncomplete``.
    """

    ok: bool
    reason: EligibilityReason | None = None
    period: Period | None = None
    window: Window | None = None
    curriculum_id: int | None = None
    documents: Sequence[DocumentStatus] = field(default_factory=tuple)

    def raise_for_denial(self) -> None:
        """Raise NotEligible if the decision is a denial."""
        if not self.ok and self.reason is not None:
            raise NotEligible(self.reason, self.documents)


def _deny(reason: EligibilityReason, **kwargs) -> EligibilityDecision:
    return EligibilityDecision(ok=False, reason=reason, **kwargs)


def offending_documents(documents: Sequence[DocumentStatus]) -> list[DocumentStatus] | None:
    """Return the documents blocking registration, or None when complete.

    An empty document list is itself incomplete; the returned list is then
    empty too.
    """
    if not documents:
        return []
    pending = [d for d in documents if not d.is_approved]
    return pending or None


class EligibilityGate:
    """Permit/deny decisions preceding any enrollment mutation.

    Attributes:
        calendar: Active period and window source.
        documents: Evidence document status source.
        curricula: Curriculum assignment reader.
    """

    def __init__(
        self,
        calendar: PeriodCalendar,
        documents: DocumentStatusProvider,
        curricula: CurriculumRepository,
    ) -> None:
        self.calendar = calendar
        self.documents = documents
        self.curricula = curricula

    async def check_registration_eligible(self, identity: Identity) -> EligibilityDecision:
        """Check whether the student may register in the active period."""
        return await self._check(identity, (WindowGate.REGISTRATION,), require_documents=True)

    async def check_amendment_eligible(self, identity: Identity) -> EligibilityDecision:
        """Check whether the student may change registrations in the amendment window."""
        return await self._check(identity, (WindowGate.AMENDMENT,), require_documents=False)

    async def check_withdrawal_eligible(self, identity: Identity) -> EligibilityDecision:
        """Check whether the student may withdraw. Either window suffices."""
        return await self._check(
            identity,
            (WindowGate.REGISTRATION, WindowGate.AMENDMENT),
            require_documents=False,
        )

    async def _check(
        self,
        identity: Identity,
        gates: tuple[WindowGate, ...],
        require_documents: bool,
    ) -> EligibilityDecision:
        curriculum_id = await self.curricula.get_curriculum_id(identity.student_id)
        if curriculum_id is None:
            logger.info("Eligibility denied: student=%s has no curriculum", identity.student_id)
            return _deny(EligibilityReason.CURRICULUM_NOT_ASSIGNED)

        period = await self.calendar.active_period()
        if period is None or period.is_archived:
            logger.info("Eligibility denied: no active period")
            return _deny(EligibilityReason.NO_ACTIVE_PERIOD, curriculum_id=curriculum_id)

        window = await self.calendar.window(period.id, identity.program_id)
        if not any(window.is_open(gate) for gate in gates):
            logger.info(
                "Eligibility denied: window closed for program=%s, gates=%s",
                identity.program_id,
                [g.value for g in gates],
            )
            return _deny(
                EligibilityReason.WINDOW_CLOSED,
                period=period,
                window=window,
                curriculum_id=curriculum_id,
            )

        if require_documents:
            statuses = await self.documents.document_statuses(identity.student_id, period.id)
            blocking = offending_documents(statuses)
            if blocking is not None:
                logger.info(
                    "Eligibility denied: student=%s has %d of %d documents unapproved",
                    identity.student_id,
                    len(blocking),
                    len(statuses),
                )
                return _deny(
                    EligibilityReason.DOCUMENTS_INCOMPLETE,
                    period=period,
                    window=window,
                    curriculum_id=curriculum_id,
                    documents=tuple(blocking),
                )

        return EligibilityDecision(
            ok=True,
            period=period,
            window=window,
            curriculum_id=curriculum_id,
        )
