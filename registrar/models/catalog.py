# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum progress, offering and schedule schemas."""

from pydantic import BaseModel, Field

from registrar.models.common import MeetingResponse


class RequisiteStatusResponse(BaseModel):
    course_id: int
    code: str | None = None
    completed: bool


class CourseProgressResponse(BaseModel):
    course_id: int
    code: str
    title: str
    credits: int
    category: str
    state: str
    failure_count: int = 0
    last_score: float | None = None
    last_period: str | None = None
    prerequisites: list[RequisiteStatusResponse] = Field(default_factory=list)
    corequisites: list[RequisiteStatusResponse] = Field(default_factory=list)


class SemesterProgressResponse(BaseModel):
    semester: int
    courses: list[CourseProgressResponse]


class ProgressResponse(BaseModel):
    """Every curriculum course with its derived state, grouped by semester."""

    student_id: int
    curriculum_id: int
    active_period: str | None = None
    semesters: list[SemesterProgressResponse]


class SectionOfferingResponse(BaseModel):
    section_id: int
    code: str
    instructor: str | None = None
    seats_available: int
    seats_max: int
    meetings: list[MeetingResponse] = Field(default_factory=list)


class CourseOfferingResponse(BaseModel):
    course_id: int
    code: str
    title: str
    credits: int
    semester: int
    state: str
    sections: list[SectionOfferingResponse] = Field(default_factory=list)


class CreditSummaryResponse(BaseModel):
    maximum: int
    registered: int
    remaining: int = Field(ge=0)


class OfferingsResponse(BaseModel):
    """Courses the student may register in the active period."""

    period_id: int
    semester: int
    courses: list[CourseOfferingResponse]
    credits: CreditSummaryResponse
    blocked_course_ids: list[int] = Field(
        default_factory=list,
        description="Mandatory repeat courses with no open seats; registration is frozen",
    )
    messages: list[str] = Field(default_factory=list)


class ScheduleEntryResponse(BaseModel):
    attempt_id: int
    section_id: int | None = None
    section_code: str | None = None
    course_id: int
    course_code: str | None = None
    course_title: str | None = None
    credits: int
    instructor: str | None = None
    meetings: list[MeetingResponse] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    student_id: int
    period_id: int
    entries: list[ScheduleEntryResponse]
    total_credits: int
