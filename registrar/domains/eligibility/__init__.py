# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Eligibility gate, period calendar and document status access."""

from registrar.domains.eligibility.calendar import PeriodCalendar, SqlPeriodCalendar
from registrar.domains.eligibility.documents import (
    DocumentStatusProvider,
    SqlDocumentStatusProvider,
)
from registrar.domains.eligibility.gate import EligibilityDecision, EligibilityGate

__all__ = [
    "PeriodCalendar",
    "SqlPeriodCalendar",
    "DocumentStatusProvider",
    "SqlDocumentStatusProvider",
    "EligibilityDecision",
    "EligibilityGate",
]
