# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    enrollment: Registration, withdrawal and the current schedule.
    amendments: Amendment-window changes and the request workflow.
    catalog: Curriculum progress and registrable offerings.
    eligibility: Permit/deny checks per action category.
"""

from fastapi import APIRouter

from registrar.api.v1 import amendments, catalog, eligibility, enrollment

router = APIRouter(prefix="/api/v1")

router.include_router(enrollment.router, prefix="/enrollment", tags=["Enrollment"])
router.include_router(amendments.router, prefix="/amendments", tags=["Amendments"])
router.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])
router.include_router(eligibility.router, prefix="/eligibility", tags=["Eligibility"])

__all__ = ["router"]
