# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Amendment API endpoints.

This module provides endpoints for:
- POST /sections - Add sections under the amendment window
- DELETE /sections/{attempt_id} - Drop a registration under the amendment window
- POST /requests - Submit a queued add/drop request
- GET /requests - Pending requests (reviewers)
- POST /requests/{request_id}/approve - Approve a request (reviewers)
- POST /requests/{request_id}/reject - Reject a request (reviewers)
- GET /students/{student_id}/schedule - A student's current schedule (reviewers)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from registrar.api.dependencies import get_amendment_service, require_identity
from registrar.domains.amendment.service import AmendmentService
from registrar.domains.common import Identity
from registrar.models.amendment import (
    AmendmentListResponse,
    AmendmentRejectRequest,
    AmendmentResponse,
    AmendmentSubmitRequest,
)
from registrar.models.catalog import ScheduleResponse
from registrar.models.enrollment import (
    RegisterRequest,
    RegistrationResponse,
    WithdrawalResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/sections",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add sections during amendments",
)
async def add_sections(
    data: RegisterRequest,
    identity: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> RegistrationResponse:
    return await service.add_sections(identity, data.section_ids)


@router.delete(
    "/sections/{attempt_id}",
    response_model=WithdrawalResponse,
    summary="Drop a registration during amendments",
)
async def drop_section(
    attempt_id: int,
    identity: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> WithdrawalResponse:
    return await service.drop_section(identity, attempt_id)


@router.post(
    "/requests",
    response_model=AmendmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an amendment request",
)
async def submit_amendment(
    data: AmendmentSubmitRequest,
    identity: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> AmendmentResponse:
    logger.info(
        "Amendment request from student %s: add=%s, drop=%s",
        identity.student_id,
        data.add_section_ids,
        data.drop_section_ids,
    )
    return await service.submit_amendment(identity, data.add_section_ids, data.drop_section_ids)


@router.get(
    "/requests",
    response_model=AmendmentListResponse,
    summary="List pending amendment requests",
)
async def list_pending_amendments(
    program_id: Annotated[
        int | None, Query(description="Program to list; defaults to the reviewer's own")
    ] = None,
    reviewer: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> AmendmentListResponse:
    return await service.list_pending_amendments(reviewer, program_id)


@router.post(
    "/requests/{request_id}/approve",
    response_model=AmendmentResponse,
    summary="Approve an amendment request",
)
async def approve_amendment(
    request_id: int,
    reviewer: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> AmendmentResponse:
    return await service.approve_amendment(reviewer, request_id)


@router.post(
    "/requests/{request_id}/reject",
    response_model=AmendmentResponse,
    summary="Reject an amendment request",
)
async def reject_amendment(
    request_id: int,
    data: AmendmentRejectRequest,
    reviewer: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> AmendmentResponse:
    return await service.reject_amendment(reviewer, request_id, data.note)


@router.get(
    "/students/{student_id}/schedule",
    response_model=ScheduleResponse,
    summary="View a student's current schedule",
)
async def get_student_schedule(
    student_id: int,
    reviewer: Identity = Depends(require_identity),
    service: AmendmentService = Depends(get_amendment_service),
) -> ScheduleResponse:
    return await service.get_student_schedule(reviewer, student_id)
