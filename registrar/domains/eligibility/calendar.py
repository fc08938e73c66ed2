# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Period calendar: the active period and per-program enrollment windows.

Calendar configuration is owned elsewhere; this module only reads it. The
one write is the lazy creation of a missing window, which is always
created with every gate closed.
"""

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.domains.common import Period, Window
from registrar.infrastructure.database.models import AcademicPeriod, EnrollmentWindow

logger = logging.getLogger(__name__)


class PeriodCalendar(Protocol):
    """Read access to the academic calendar."""

    async def active_period(self) -> Period | None:
        ...

    async def window(self, period_id: int, program_id: int) -> Window:
        """Get the window for (period, program), creating it closed if absent."""
        ...


class SqlPeriodCalendar:
    """PeriodCalendar backed by ``academic_periods`` and ``enrollment_windows``.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def active_period(self) -> Period | None:
        result = await self.db.execute(
            select(AcademicPeriod).where(
                AcademicPeriod.is_active.is_(True),
                AcademicPeriod.is_archived.is_(False),
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return Period(
            id=row.id,
            year=row.year,
            term=row.term,
            is_active=row.is_active,
            is_archived=row.is_archived,
        )

    async def window(self, period_id: int, program_id: int) -> Window:
        """Get the enrollment window, creating a closed one if none exists.

        Concurrent creators race on the (period, program) unique constraint;
        ``ON CONFLICT DO NOTHING`` lets every racer re-read the single row.

        Args:
            period_id: Academic period identifier.
            program_id: Program identifier.

        Returns:
            The window flags.
        """
        existing = await self._read_window(period_id, program_id)
        if existing is not None:
            return existing

        await self.db.execute(
            insert(EnrollmentWindow)
            .values(
                period_id=period_id,
                program_id=program_id,
                documents_open=False,
                registration_open=False,
                amendment_open=False,
            )
            .on_conflict_do_nothing(index_elements=["period_id", "program_id"])
        )
        await self.db.commit()
        logger.info(
            "Created closed enrollment window: period=%s, program=%s", period_id, program_id
        )

        created = await self._read_window(period_id, program_id)
        if created is None:
            raise RuntimeError(
                f"Enrollment window for period {period_id}, program {program_id} vanished"
            )
        return created

    async def _read_window(self, period_id: int, program_id: int) -> Window | None:
        result = await self.db.execute(
            select(EnrollmentWindow).where(
                EnrollmentWindow.period_id == period_id,
                EnrollmentWindow.program_id == program_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return Window(
            period_id=row.period_id,
            program_id=row.program_id,
            documents_open=row.documents_open,
            registration_open=row.registration_open,
            amendment_open=row.amendment_open,
        )
