# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Weekly schedule conflict detection."""

from registrar.domains.scheduling.conflicts import (
    TimeBlock,
    blocks_for,
    blocks_overlap,
    check_schedule,
    find_conflict,
)

__all__ = ["TimeBlock", "blocks_for", "blocks_overlap", "check_schedule", "find_conflict"]
