# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-only catalog views."""

from registrar.domains.catalog.service import CatalogService

__all__ = ["CatalogService"]
