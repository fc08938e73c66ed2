# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic history accessor.

Reads a student's attempt records across every period, ordered by period
ordinal, and owns the only two writes ever made to that history: inserting
a ``registered`` attempt and deleting one.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.domains.common import period_ordinal
from registrar.infrastructure.database.models import AcademicPeriod, AttemptRecord, Course

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptSnapshot:
    """One attempt record joined with its period and course credits."""

    id: int
    student_id: int
    course_id: int
    period_id: int
    year: int
    term: int
    outcome: str
    score: float | None = None
    section_id: int | None = None
    credits: int = 0

    @property
    def ordinal(self) -> int:
        return period_ordinal(self.year, self.term)

    @property
    def period_label(self) -> str:
        return f"{self.year}-{self.term}"


def _to_float(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


def group_by_course(attempts: list[AttemptSnapshot]) -> dict[int, list[AttemptSnapshot]]:
    """Group attempts per course, each list ordered by period ordinal."""
    grouped: dict[int, list[AttemptSnapshot]] = {}
    for attempt in sorted(attempts, key=lambda a: (a.ordinal, a.id)):
        grouped.setdefault(attempt.course_id, []).append(attempt)
    return grouped


class HistoryRepository:
    """Reads and writes attempt records.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _select(self):
        return (
            select(AttemptRecord, AcademicPeriod.year, AcademicPeriod.term, Course.credits)
            .join(AcademicPeriod, AcademicPeriod.id == AttemptRecord.period_id)
            .join(Course, Course.id == AttemptRecord.course_id)
        )

    @staticmethod
    def _to_snapshot(record: AttemptRecord, year: int, term: int, credits: int) -> AttemptSnapshot:
        return AttemptSnapshot(
            id=record.id,
            student_id=record.student_id,
            course_id=record.course_id,
            period_id=record.period_id,
            year=year,
            term=term,
            outcome=record.outcome,
            score=_to_float(record.score),
            section_id=record.section_id,
            credits=credits,
        )

    async def load_history(self, student_id: int) -> list[AttemptSnapshot]:
        """Load every attempt of a student, ordered by period ordinal.

        Args:
            student_id: Student identifier.

        Returns:
            All attempts across periods, oldest first.
        """
        result = await self.db.execute(
            self._select()
            .where(AttemptRecord.student_id == student_id)
            .order_by(AcademicPeriod.year, AcademicPeriod.term, AttemptRecord.id)
        )
        return [self._to_snapshot(*row) for row in result.all()]

    async def get_attempt(self, attempt_id: int) -> AttemptSnapshot | None:
        result = await self.db.execute(self._select().where(AttemptRecord.id == attempt_id))
        row = result.one_or_none()
        return self._to_snapshot(*row) if row else None

    async def insert_registered(
        self,
        student_id: int,
        course_id: int,
        period_id: int,
        section_id: int,
    ) -> int:
        """Insert a ``registered`` attempt.

        Returns:
            The new attempt id.

        Raises:
            IntegrityError: If the student already holds a registration for
                the course in this period.
        """
        result = await self.db.execute(
            insert(AttemptRecord)
            .values(
                student_id=student_id,
                course_id=course_id,
                period_id=period_id,
                section_id=section_id,
                outcome="registered",
            )
            .returning(AttemptRecord.id)
        )
        return result.scalar_one()

    async def delete_attempt(self, attempt_id: int) -> bool:
        """Delete a ``registered`` attempt.

        Returns:
            True if a row was deleted.
        """
        result = await self.db.execute(
            delete(AttemptRecord)
            .where(AttemptRecord.id == attempt_id, AttemptRecord.outcome == "registered")
            .returning(AttemptRecord.id)
        )
        return result.scalar_one_or_none() is not None
