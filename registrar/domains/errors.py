# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment error hierarchy.

Every rejected request raises exactly one subclass of
:class:`EnrollmentError`. The first violated check wins; errors are never
aggregated. Each error carries a stable ``kind`` string and a structured
``detail`` mapping that the HTTP layer serializes verbatim.
"""

from typing import Any, Sequence

from registrar.domains.common import DocumentStatus, EligibilityReason


class EnrollmentError(Exception):
    """Base exception for enrollment errors."""

    kind: str = "Internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> dict[str, Any]:
        """Structured fields describing the failure."""
        return {}


class InvalidInput(EnrollmentError):
    """Raised when request identifiers are malformed or inconsistent."""

    kind = "InvalidInput"


class NotEligible(EnrollmentError):
    """Raised when the eligibility gate denies the request."""

    kind = "NotEligible"

    def __init__(
        self,
        reason: EligibilityReason,
        documents: Sequence[DocumentStatus] = (),
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"Not eligible: {reason.value}")
        self.reason = reason
        self.documents = list(documents)

    @property
    def detail(self) -> dict[str, Any]:
        return {
            "reason": self.reason.value,
            "documents": [{"kind": d.kind, "status": d.status} for d in self.documents],
        }


class CourseStateConflict(EnrollmentError):
    """Raised when a course's derived state forbids the operation."""

    kind = "CourseStateConflict"

    def __init__(self, course_id: int, state: str) -> None:
        super().__init__(f"Course {course_id} is {state}")
        self.course_id = course_id
        self.state = state

    @property
    def detail(self) -> dict[str, Any]:
        return {"course_id": self.course_id, "state": self.state}


class PrerequisiteUnmet(EnrollmentError):
    kind = "PrerequisiteUnmet"

    def __init__(self, course_id: int, missing_id: int) -> None:
        super().__init__(f"Course {course_id} requires course {missing_id} to be completed")
        self.course_id = course_id
        self.missing_id = missing_id

    @property
    def detail(self) -> dict[str, Any]:
        return {"course_id": self.course_id, "missing_id": self.missing_id}


class CorequisiteUnmet(EnrollmentError):
    kind = "CorequisiteUnmet"

    def __init__(self, course_id: int, missing_id: int) -> None:
        super().__init__(
            f"Course {course_id} must be taken together with course {missing_id}"
        )
        self.course_id = course_id
        self.missing_id = missing_id

    @property
    def detail(self) -> dict[str, Any]:
        return {"course_id": self.course_id, "missing_id": self.missing_id}


class ScheduleConflict(EnrollmentError):
    kind = "ScheduleConflict"

    def __init__(self, section_a: int, section_b: int) -> None:
        super().__init__(f"Sections {section_a} and {section_b} overlap")
        self.section_a = section_a
        self.section_b = section_b

    @property
    def detail(self) -> dict[str, Any]:
        return {"section_a": self.section_a, "section_b": self.section_b}


class CreditLimitExceeded(EnrollmentError):
    kind = "CreditLimitExceeded"

    def __init__(self, current: int, incoming: int, maximum: int) -> None:
        super().__init__(
            f"Credit limit exceeded: {current} registered + {incoming} requested > {maximum}"
        )
        self.current = current
        self.incoming = incoming
        self.maximum = maximum

    @property
    def detail(self) -> dict[str, Any]:
        return {"current": self.current, "incoming": self.incoming, "maximum": self.maximum}


class MandatoryRepeatBlocked(EnrollmentError):
    """Raised while a mandatory repeat course blocks the request."""

    kind = "MandatoryRepeatBlocked"

    def __init__(self, course_id: int) -> None:
        super().__init__(f"Course {course_id} must be repeated first")
        self.course_id = course_id

    @property
    def detail(self) -> dict[str, Any]:
        return {"course_id": self.course_id}


class SeatNoLongerAvailable(EnrollmentError):
    """Raised when a section has no seat left. Callers may retry."""

    kind = "SeatNoLongerAvailable"

    def __init__(self, section_id: int) -> None:
        super().__init__(f"Section {section_id} has no seats available")
        self.section_id = section_id

    @property
    def detail(self) -> dict[str, Any]:
        return {"section_id": self.section_id}


class NotFound(EnrollmentError):
    kind = "NotFound"

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    @property
    def detail(self) -> dict[str, Any]:
        return {"entity": self.entity, "entity_id": self.entity_id}


class Internal(EnrollmentError):
    """Opaque store failure. The cause is logged, never returned."""

    kind = "Internal"

    def __init__(self, message: str = "Internal error") -> None:
        super().__init__(message)
