# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Business domains of the registrar core.

Each subpackage owns one concern of the enrollment engine: reading the
curriculum graph and attempt history, classifying course state, gating
eligibility, validating schedules and credit loads, and committing
registrations.
"""
