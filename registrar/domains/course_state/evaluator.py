# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course state evaluator.

Classifies one curriculum course for one student from the attempt history
of that course, the active period, and whether the course still has unmet
hard prerequisites. The result is never persisted; it is recomputed from
snapshots on every request.

Rules, first match wins:

1. A ``registered`` attempt in the active period -> ``registered``.
2. Newest-first, a ``passed`` attempt at or above the passing score, or a
   ``waived`` attempt -> ``completed``.
3. Two or more ``failed`` attempts -> ``repeat-mandatory``.
4. A failure whose grace period went unused (the active period is at least
   two ordinals later and nothing was attempted in the period right after
   the failure) -> ``repeat-mandatory``.
5. Any other failure -> ``repeat-pending``.
6. Unmet hard prerequisites -> ``waiting``.
7. Otherwise -> ``active``.

Example:
    >>> state = derive_state(history, active_period, has_unmet_prerequisites=False)
    >>> state.status
    <CourseStatus.REPEAT_PENDING: 'repeat-pending'>
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from registrar.domains.common import Period
from registrar.domains.history.repository import AttemptSnapshot

DEFAULT_PASSING_SCORE = 3.0


class CourseStatus(str, Enum):
    ACTIVE = "active"
    REGISTERED = "registered"
    COMPLETED = "completed"
    WAITING = "waiting"
    REPEAT_PENDING = "repeat-pending"
    REPEAT_MANDATORY = "repeat-mandatory"


REPEAT_STATES = frozenset({CourseStatus.REPEAT_PENDING, CourseStatus.REPEAT_MANDATORY})


@dataclass(frozen=True)
class CourseState:
    """Derived state of one course.

    Attributes:
        status: The classification.
        last_score: Score of the attempt that decided the state, if any.
        failure_count: Number of failed attempts.
        last_period: Label of the deciding attempt's period (``2024-1``).
        section_id: Registered section, when ``registered``.
        attempt_id: Registered attempt, when ``registered``.
    """

    status: CourseStatus
    last_score: float | None = None
    failure_count: int = 0
    last_period: str | None = None
    section_id: int | None = None
    attempt_id: int | None = None

    @property
    def needs_repeat(self) -> bool:
        return self.status in REPEAT_STATES


def is_passing(attempt: AttemptSnapshot, passing_score: float = DEFAULT_PASSING_SCORE) -> bool:
    """Whether an attempt counts as completing the course."""
    if attempt.outcome == "waived":
        return True
    if attempt.outcome != "passed":
        return False
    return attempt.score is not None and attempt.score >= passing_score


def is_completed(
    history: Sequence[AttemptSnapshot],
    passing_score: float = DEFAULT_PASSING_SCORE,
) -> bool:
    """Whether any attempt in the history completes the course."""
    return any(is_passing(attempt, passing_score) for attempt in history)


def derive_state(
    history: Sequence[AttemptSnapshot],
    active_period: Period | None,
    has_unmet_prerequisites: bool,
    passing_score: float = DEFAULT_PASSING_SCORE,
) -> CourseState:
    """Derive the state of one course.

    Args:
        history: Attempts of this course, ordered by period ordinal.
        active_period: The active period, or None outside any period.
        has_unmet_prerequisites: True if a hard prerequisite is not completed.
        passing_score: Minimum score for a ``passed`` attempt to count.

    Returns:
        The derived course state.
    """
    if active_period is not None:
        for attempt in history:
            if attempt.outcome == "registered" and attempt.period_id == active_period.id:
                return CourseState(
                    status=CourseStatus.REGISTERED,
                    last_score=attempt.score,
                    last_period=attempt.period_label,
                    section_id=attempt.section_id,
                    attempt_id=attempt.id,
                )

    for attempt in reversed(history):
        if is_passing(attempt, passing_score):
            return CourseState(
                status=CourseStatus.COMPLETED,
                last_score=attempt.score,
                last_period=attempt.period_label,
            )

    failures = [a for a in history if a.outcome == "failed"]
    if failures:
        last_failure = max(failures, key=lambda a: (a.ordinal, a.id))
        state = dict(
            last_score=last_failure.score,
            failure_count=len(failures),
            last_period=last_failure.period_label,
        )
        if len(failures) >= 2:
            return CourseState(status=CourseStatus.REPEAT_MANDATORY, **state)
        if _grace_expired(history, last_failure, active_period):
            return CourseState(status=CourseStatus.REPEAT_MANDATORY, **state)
        return CourseState(status=CourseStatus.REPEAT_PENDING, **state)

    if has_unmet_prerequisites:
        return CourseState(status=CourseStatus.WAITING)
    return CourseState(status=CourseStatus.ACTIVE)


def _grace_expired(
    history: Sequence[AttemptSnapshot],
    last_failure: AttemptSnapshot,
    active_period: Period | None,
) -> bool:
    if active_period is None:
        return False
    grace_ordinal = last_failure.ordinal + 1
    if active_period.ordinal < grace_ordinal + 1:
        return False
    return not any(a.ordinal == grace_ordinal for a in history)
