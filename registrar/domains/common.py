# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Snapshot types shared across domains.

These are plain immutable values read from the store once per request.
Nothing in here talks to the database.
"""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum


class EligibilityReason(str, Enum):
    """Why an eligibility check denied the request."""

    CURRICULUM_NOT_ASSIGNED = "CurriculumNotAssigned"
    NO_ACTIVE_PERIOD = "NoActivePeriod"
    WINDOW_CLOSED = "WindowClosed"
    DOCUMENTS_INCOMPLETE = "DocumentsIncomplete"
    REVIEWER_NOT_AUTHORIZED = "ReviewerNotAuthorized"


class WindowGate(str, Enum):
    DOCUMENTS = "documents"
    REGISTRATION = "registration"
    AMENDMENT = "amendment"


@dataclass(frozen=True)
class Identity:
    """Trusted caller identity.

    Attributes:
        student_id: Student (or staff) identifier.
        program_id: Academic program the caller belongs to.
        role: Role name, e.g. ``student`` or ``department_head``.
    """

    student_id: int
    program_id: int
    role: str


def period_ordinal(year: int, term: int) -> int:
    """Total order over periods: ``year * 2 + (term - 1)``."""
    return year * 2 + (term - 1)


@dataclass(frozen=True)
class Period:
    id: int
    year: int
    term: int
    is_active: bool = False
    is_archived: bool = False

    @property
    def ordinal(self) -> int:
        return period_ordinal(self.year, self.term)

    @property
    def label(self) -> str:
        return f"{self.year}-{self.term}"


@dataclass(frozen=True)
class Window:
    """Enrollment window flags for one (period, program)."""

    period_id: int
    program_id: int
    documents_open: bool = False
    registration_open: bool = False
    amendment_open: bool = False

    def is_open(self, gate: WindowGate) -> bool:
        if gate is WindowGate.DOCUMENTS:
            return self.documents_open
        if gate is WindowGate.REGISTRATION:
            return self.registration_open
        return self.amendment_open


@dataclass(frozen=True)
class DocumentStatus:
    kind: str
    status: str

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"


@dataclass(frozen=True)
class Meeting:
    day: str
    starts_at: time | str
    ends_at: time | str
    room: str | None = None


@dataclass(frozen=True)
class SectionInfo:
    """Snapshot of a section and its weekly meetings."""

    id: int
    course_id: int
    period_id: int
    code: str
    seats_max: int
    seats_available: int
    instructor: str | None = None
    meetings: tuple[Meeting, ...] = field(default_factory=tuple)
