# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credit load accountant."""

from typing import Iterable

from registrar.domains.curriculum.repository import CurriculumGraph
from registrar.domains.errors import CreditLimitExceeded
from registrar.domains.history.repository import AttemptSnapshot


def current_load(attempts: Iterable[AttemptSnapshot], period_id: int) -> int:
    """Sum credits of the ``registered`` attempts in a period."""
    return sum(
        a.credits for a in attempts if a.outcome == "registered" and a.period_id == period_id
    )


def max_load(curriculum: CurriculumGraph, semester: int) -> int:
    """Credit cap for a curriculum semester.

    Uses the explicit cap when set, otherwise the total credits of the
    curriculum courses planned for that semester.
    """
    cap = curriculum.credit_caps.get(semester)
    if cap is not None:
        return cap
    return sum(c.credits for c in curriculum.courses_in_semester(semester))


def check_load(current: int, incoming: int, maximum: int) -> None:
    """Raise CreditLimitExceeded unless ``current + incoming <= maximum``."""
    if current + incoming > maximum:
        raise CreditLimitExceeded(current=current, incoming=incoming, maximum=maximum)
