# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mapping of enrollment errors to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from registrar.domains.errors import EnrollmentError
from registrar.models.common import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "InvalidInput": status.HTTP_400_BAD_REQUEST,
    "NotEligible": status.HTTP_403_FORBIDDEN,
    "NotFound": status.HTTP_404_NOT_FOUND,
    "SeatNoLongerAvailable": status.HTTP_409_CONFLICT,
    "CourseStateConflict": status.HTTP_409_CONFLICT,
    "ScheduleConflict": status.HTTP_409_CONFLICT,
    "CreditLimitExceeded": status.HTTP_409_CONFLICT,
    "MandatoryRepeatBlocked": status.HTTP_409_CONFLICT,
    "PrerequisiteUnmet": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "CorequisiteUnmet": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "Internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def enrollment_error_handler(request: Request, exc: EnrollmentError) -> JSONResponse:
    """Render an EnrollmentError as ``{"error", "message", "detail"}``."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("Request failed: %s %s -> %s", request.method, request.url.path, exc.kind)
    body = ErrorResponse(error=exc.kind, message=exc.message, detail=exc.detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())
