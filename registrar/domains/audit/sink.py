# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Audit sinks.

Audit is fire-and-forget: a failing sink is logged and never fails the
operation that produced the entry. The database sink writes through its
own session so an audit row is never part of, and never rolls back, an
enrollment transaction.
"""

import json
import logging
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from registrar.infrastructure.database.models import AuditEntry

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    async def record(self, actor_id: int | None, action: str, detail: dict[str, Any]) -> None:
        ...


class DatabaseAuditSink:
    """Appends audit entries to ``audit_log``.

    Attributes:
        sessionmaker: Factory for short-lived audit sessions.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self.sessionmaker = sessionmaker

    async def record(self, actor_id: int | None, action: str, detail: dict[str, Any]) -> None:
        async with self.sessionmaker() as session:
            session.add(
                AuditEntry(
                    actor_id=actor_id,
                    action=action,
                    detail=json.dumps(detail, default=str, sort_keys=True),
                )
            )
            await session.commit()


class LoggingAuditSink:
    """Writes audit entries to the application log."""

    async def record(self, actor_id: int | None, action: str, detail: dict[str, Any]) -> None:
        logger.info("Audit: actor=%s, action=%s, detail=%s", actor_id, action, detail)


async def record_safely(
    sink: AuditSink,
    actor_id: int | None,
    action: str,
    detail: dict[str, Any],
) -> None:
    """Record an audit entry, logging instead of raising on failure."""
    try:
        await sink.record(actor_id, action, detail)
    except Exception as e:
        logger.warning("Audit record failed: action=%s, actor=%s, error=%s", action, actor_id, e)
