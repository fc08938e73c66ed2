# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Eligibility check endpoint."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query

from registrar.api.dependencies import get_enrollment_service, require_identity
from registrar.domains.common import Identity
from registrar.domains.enrollment.service import EnrollmentService
from registrar.models.eligibility import EligibilityResponse

router = APIRouter()


@router.get(
    "",
    response_model=EligibilityResponse,
    summary="Check eligibility",
    description="Read-only permit/deny decision. May create a missing window, closed.",
)
async def check_eligibility(
    action: Annotated[
        Literal["registration", "amendment", "withdrawal"],
        Query(description="Action category to check"),
    ] = "registration",
    identity: Identity = Depends(require_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EligibilityResponse:
    return await service.check_eligibility(identity, action)
