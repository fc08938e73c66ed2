# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum graph accessor."""

from registrar.domains.curriculum.repository import (
    CurriculumCourseInfo,
    CurriculumGraph,
    CurriculumRepository,
)

__all__ = [
    "CurriculumCourseInfo",
    "CurriculumGraph",
    "CurriculumRepository",
]
