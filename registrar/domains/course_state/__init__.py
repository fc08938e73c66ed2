# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course state evaluator."""

from registrar.domains.course_state.evaluator import (
    DEFAULT_PASSING_SCORE,
    REPEAT_STATES,
    CourseState,
    CourseStatus,
    derive_state,
    is_completed,
    is_passing,
)

__all__ = [
    "DEFAULT_PASSING_SCORE",
    "REPEAT_STATES",
    "CourseState",
    "CourseStatus",
    "derive_state",
    "is_completed",
    "is_passing",
]
