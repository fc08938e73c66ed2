# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section repository.

Section lookup with weekly meetings, plus the two guarded seat-counter
updates. A seat is taken by a single conditional ``UPDATE`` that only
matches while seats remain, so concurrent requests never drive the counter
below zero and no application lock is involved.
"""

import logging
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from registrar.domains.common import Meeting, SectionInfo
from registrar.infrastructure.database.models import Section

logger = logging.getLogger(__name__)


def _to_info(section: Section) -> SectionInfo:
    return SectionInfo(
        id=section.id,
        course_id=section.course_id,
        period_id=section.period_id,
        code=section.code,
        seats_max=section.seats_max,
        seats_available=section.seats_available,
        instructor=section.instructor,
        meetings=tuple(
            Meeting(day=m.day, starts_at=m.starts_at, ends_at=m.ends_at, room=m.room)
            for m in section.meetings
        ),
    )


class SectionRepository:
    """Reads sections and updates their seat counters.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_sections(self, section_ids: Iterable[int]) -> dict[int, SectionInfo]:
        """Load sections by id. Unknown ids are absent from the result."""
        ids = list(section_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(Section).options(selectinload(Section.meetings)).where(Section.id.in_(ids))
        )
        return {s.id: _to_info(s) for s in result.scalars().all()}

    async def list_for_courses(
        self,
        period_id: int,
        course_ids: Iterable[int],
    ) -> list[SectionInfo]:
        """List the period's sections of the given courses, ordered by code."""
        ids = list(course_ids)
        if not ids:
            return []
        result = await self.db.execute(
            select(Section)
            .options(selectinload(Section.meetings))
            .where(Section.period_id == period_id, Section.course_id.in_(ids))
            .order_by(Section.course_id, Section.code)
        )
        return [_to_info(s) for s in result.scalars().all()]

    async def courses_with_open_seats(
        self,
        period_id: int,
        course_ids: Iterable[int],
    ) -> set[int]:
        """Return which of the courses have a section with a free seat."""
        ids = list(course_ids)
        if not ids:
            return set()
        result = await self.db.execute(
            select(Section.course_id)
            .where(
                Section.period_id == period_id,
                Section.course_id.in_(ids),
                Section.seats_available > 0,
            )
            .distinct()
        )
        return set(result.scalars().all())

    async def reserve_seat(self, section_id: int) -> bool:
        """Take one seat if any is left.

        Returns:
            True if a seat was taken, False if the section was full.
        """
        result = await self.db.execute(
            update(Section)
            .where(Section.id == section_id, Section.seats_available > 0)
            .values(seats_available=Section.seats_available - 1)
            .returning(Section.seats_available)
        )
        remaining = result.scalar_one_or_none()
        if remaining is None:
            logger.warning("Seat reservation lost: section=%s is full", section_id)
            return False
        logger.debug("Seat reserved: section=%s, remaining=%s", section_id, remaining)
        return True

    async def release_seat(self, section_id: int) -> bool:
        """Give one seat back, never above ``seats_max``.

        Returns:
            True if the counter was incremented.
        """
        result = await self.db.execute(
            update(Section)
            .where(Section.id == section_id, Section.seats_available < Section.seats_max)
            .values(seats_available=Section.seats_available + 1)
            .returning(Section.seats_available)
        )
        return result.scalar_one_or_none() is not None
