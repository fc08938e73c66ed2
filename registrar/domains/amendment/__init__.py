# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Amendment window changes and the queued request workflow."""

from registrar.domains.amendment.repository import AmendmentRequestRepository
from registrar.domains.amendment.service import AmendmentService

__all__ = ["AmendmentRequestRepository", "AmendmentService"]
