# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides the registration engine:
- Section lookup and guarded seat counters
- The pure validation phase
- The transaction coordinator
"""

from registrar.domains.enrollment.service import EnrollmentService

__all__ = ["EnrollmentService"]
