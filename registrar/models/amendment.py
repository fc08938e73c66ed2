# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Amendment request schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AmendmentSubmitRequest(BaseModel):
    """A queued add/drop change.

    Drop ids are section ids the student is currently registered in.
    """

    add_section_ids: list[int] = Field(default_factory=list)
    drop_section_ids: list[int] = Field(default_factory=list)


class AmendmentRejectRequest(BaseModel):
    note: str | None = Field(default=None, max_length=2000)


class AmendmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    program_id: int
    period_id: int
    add_section_ids: list[int]
    drop_section_ids: list[int]
    status: Literal["pending", "approved", "rejected"]
    reviewer_id: int | None = None
    review_note: str | None = None
    submitted_at: datetime
    reviewed_at: datetime | None = None


class AmendmentListResponse(BaseModel):
    items: list[AmendmentResponse]
    total: int
