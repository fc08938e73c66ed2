# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware."""

from registrar.api.middleware.auth import AuthMiddleware, get_current_identity

__all__ = ["AuthMiddleware", "get_current_identity"]
