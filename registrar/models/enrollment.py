# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Registration and withdrawal schemas."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Sections to register in one all-or-nothing batch."""

    section_ids: list[int] = Field(
        description="Section identifiers. Must be non-empty, positive and unique.",
    )


class RegisteredSectionResponse(BaseModel):
    attempt_id: int
    section_id: int
    section_code: str
    course_id: int
    course_code: str
    course_title: str
    credits: int


class RegistrationResponse(BaseModel):
    """Result of a committed registration batch."""

    student_id: int
    period_id: int
    registrations: list[RegisteredSectionResponse]
    total_credits: int = Field(description="Credits added by this batch")


class WithdrawalResponse(BaseModel):
    attempt_id: int
    course_id: int
    section_id: int | None = None
    period_id: int
