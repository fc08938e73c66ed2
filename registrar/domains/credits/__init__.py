# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credit load accounting."""

from registrar.domains.credits.accountant import check_load, current_load, max_load

__all__ = ["check_load", "current_load", "max_load"]
