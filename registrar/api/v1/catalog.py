# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog API endpoints.

- GET /progress - Curriculum progress by semester
- GET /offerings - Courses and sections open for registration
"""

from fastapi import APIRouter, Depends

from registrar.api.dependencies import get_catalog_service, require_identity
from registrar.domains.catalog.service import CatalogService
from registrar.domains.common import Identity
from registrar.models.catalog import OfferingsResponse, ProgressResponse

router = APIRouter()


@router.get("/progress", response_model=ProgressResponse, summary="Curriculum progress")
async def get_progress(
    identity: Identity = Depends(require_identity),
    service: CatalogService = Depends(get_catalog_service),
) -> ProgressResponse:
    return await service.get_progress(identity)


@router.get("/offerings", response_model=OfferingsResponse, summary="Registrable offerings")
async def list_offerings(
    identity: Identity = Depends(require_identity),
    service: CatalogService = Depends(get_catalog_service),
) -> OfferingsResponse:
    return await service.list_offerings(identity)
