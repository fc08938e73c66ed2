# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Evidence document statuses, read from the document subsystem's table."""

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.domains.common import DocumentStatus
from registrar.infrastructure.database.models import StudentDocument


class DocumentStatusProvider(Protocol):
    async def document_statuses(self, student_id: int, period_id: int) -> list[DocumentStatus]:
        ...


class SqlDocumentStatusProvider:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def document_statuses(self, student_id: int, period_id: int) -> list[DocumentStatus]:
        result = await self.db.execute(
            select(StudentDocument.kind, StudentDocument.review_status)
            .where(
                StudentDocument.student_id == student_id,
                StudentDocument.period_id == period_id,
            )
            .order_by(StudentDocument.kind)
        )
        return [DocumentStatus(kind=kind, status=status) for kind, status in result.all()]
