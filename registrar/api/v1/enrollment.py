# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

This module provides endpoints for:
- POST /registrations - Register a batch of sections
- DELETE /registrations/{attempt_id} - Withdraw a registration
- GET /schedule - Current weekly schedule

Rejections are raised as EnrollmentError and rendered by the application
error handler.
"""

import logging

from fastapi import APIRouter, Depends, status

from registrar.api.dependencies import (
    get_catalog_service,
    get_enrollment_service,
    require_identity,
)
from registrar.domains.catalog.service import CatalogService
from registrar.domains.common import Identity
from registrar.domains.enrollment.service import EnrollmentService
from registrar.models.catalog import ScheduleResponse
from registrar.models.common import ErrorResponse
from registrar.models.enrollment import (
    RegisterRequest,
    RegistrationResponse,
    WithdrawalResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@router.post(
    "/registrations",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Register sections",
    description="Register a batch of sections in the active period, all or nothing.",
)
async def register(
    data: RegisterRequest,
    identity: Identity = Depends(require_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> RegistrationResponse:
    logger.info("Registering sections %s for student %s", data.section_ids, identity.student_id)
    return await service.register(identity, data.section_ids)


@router.delete(
    "/registrations/{attempt_id}",
    response_model=WithdrawalResponse,
    responses=_ERRORS,
    summary="Withdraw a registration",
)
async def withdraw(
    attempt_id: int,
    identity: Identity = Depends(require_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> WithdrawalResponse:
    """Withdraw while the registration or amendment window is open."""
    return await service.withdraw(identity, attempt_id)


@router.get(
    "/schedule",
    response_model=ScheduleResponse,
    responses={403: {"model": ErrorResponse}},
    summary="Current schedule",
)
async def get_schedule(
    identity: Identity = Depends(require_identity),
    service: CatalogService = Depends(get_catalog_service),
) -> ScheduleResponse:
    return await service.get_schedule(identity)
