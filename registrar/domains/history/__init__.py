# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic history accessor."""

from registrar.domains.history.repository import AttemptSnapshot, HistoryRepository

__all__ = ["AttemptSnapshot", "HistoryRepository"]
