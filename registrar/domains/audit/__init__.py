# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Audit recording."""

from registrar.domains.audit.sink import (
    AuditSink,
    DatabaseAuditSink,
    LoggingAuditSink,
    record_safely,
)

__all__ = ["AuditSink", "DatabaseAuditSink", "LoggingAuditSink", "record_safely"]
