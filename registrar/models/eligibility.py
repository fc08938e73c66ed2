# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Eligibility check schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class DocumentStatusResponse(BaseModel):
    kind: str
    status: str


class EligibilityResponse(BaseModel):
    """Permit/deny decision for one action category."""

    action: Literal["registration", "amendment", "withdrawal"]
    eligible: bool
    reason: str | None = Field(
        default=None,
        description="Denial reason, e.g. WindowClosed or DocumentsIncomplete",
    )
    period_id: int | None = None
    period_label: str | None = None
    documents: list[DocumentStatusResponse] = Field(
        default_factory=list,
        description="Unapproved documents when reason is DocumentsIncomplete",
    )
