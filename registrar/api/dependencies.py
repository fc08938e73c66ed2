# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Example:
    @router.post("/register")
    async def register(
        identity: Identity = Depends(require_identity),
        service: EnrollmentService = Depends(get_enrollment_service),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.api.middleware.auth import get_current_identity
from registrar.core.config import get_settings
from registrar.domains.amendment.service import AmendmentService
from registrar.domains.audit.sink import AuditSink, DatabaseAuditSink
from registrar.domains.catalog.service import CatalogService
from registrar.domains.common import Identity
from registrar.domains.enrollment.service import EnrollmentService
from registrar.infrastructure.database.connection import get_session, get_sessionmaker

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session scoped to the request."""
    async with get_session() as session:
        yield session


def get_audit_sink() -> AuditSink:
    return DatabaseAuditSink(get_sessionmaker())


def require_identity(request: Request) -> Identity:
    """Require a resolved identity.

    Raises:
        HTTPException: 401 if the request carries no valid token.
    """
    identity = get_current_identity(request)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def get_enrollment_service(
    db: AsyncSession = Depends(get_db),
    audit: AuditSink = Depends(get_audit_sink),
) -> EnrollmentService:
    return EnrollmentService(db, get_settings(), audit=audit)


def get_amendment_service(
    db: AsyncSession = Depends(get_db),
    enrollment: EnrollmentService = Depends(get_enrollment_service),
) -> AmendmentService:
    return AmendmentService(db, get_settings(), enrollment=enrollment)


def get_catalog_service(
    enrollment: EnrollmentService = Depends(get_enrollment_service),
) -> CatalogService:
    return CatalogService(enrollment)
