# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Amendment request persistence."""

from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.infrastructure.database.models import AmendmentRequest
from registrar.utils.datetime import utc_now


class AmendmentRequestRepository:
    """Reads and writes amendment requests.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, request_id: int) -> AmendmentRequest | None:
        return await self.db.get(AmendmentRequest, request_id)

    async def find_pending(self, student_id: int, period_id: int) -> AmendmentRequest | None:
        result = await self.db.execute(
            select(AmendmentRequest).where(
                AmendmentRequest.student_id == student_id,
                AmendmentRequest.period_id == period_id,
                AmendmentRequest.status == "pending",
            )
        )
        return result.scalar_one_or_none()

    async def list_pending(self, program_id: int) -> list[AmendmentRequest]:
        result = await self.db.execute(
            select(AmendmentRequest)
            .where(
                AmendmentRequest.program_id == program_id,
                AmendmentRequest.status == "pending",
            )
            .order_by(AmendmentRequest.submitted_at, AmendmentRequest.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        student_id: int,
        program_id: int,
        period_id: int,
        add_section_ids: Sequence[int],
        drop_section_ids: Sequence[int],
    ) -> AmendmentRequest:
        """Persist a pending request.

        Raises:
            IntegrityError: If the student already has a pending request
                for the period.
        """
        request = AmendmentRequest(
            student_id=student_id,
            program_id=program_id,
            period_id=period_id,
            add_section_ids=list(add_section_ids),
            drop_section_ids=list(drop_section_ids),
            status="pending",
            submitted_at=utc_now(),
        )
        self.db.add(request)
        await self.db.flush()
        return request

    async def set_status(
        self,
        request: AmendmentRequest,
        status: str,
        reviewer_id: int,
        note: str | None = None,
        reviewed_at: datetime | None = None,
    ) -> AmendmentRequest:
        request.status = status
        request.reviewer_id = reviewer_id
        request.review_note = note
        request.reviewed_at = reviewed_at or utc_now()
        await self.db.flush()
        return request
