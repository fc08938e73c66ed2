# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas shared by several endpoints."""

from datetime import time
from typing import Any

from pydantic import BaseModel, Field

from registrar.domains.common import Meeting
from registrar.utils.datetime import parse_clock


class ErrorResponse(BaseModel):
    """Body returned for every rejected request."""

    error: str = Field(description="Stable error kind, e.g. ScheduleConflict")
    message: str = Field(description="Human-readable description")
    detail: dict[str, Any] = Field(default_factory=dict, description="Structured fields")


class MeetingResponse(BaseModel):
    day: str
    starts_at: str = Field(description="Start time as HH:MM")
    ends_at: str = Field(description="End time as HH:MM")
    room: str | None = None

    @classmethod
    def from_meeting(cls, meeting: Meeting) -> "MeetingResponse":
        return cls(
            day=meeting.day,
            starts_at=_clock(meeting.starts_at),
            ends_at=_clock(meeting.ends_at),
            room=meeting.room,
        )


def _clock(value: time | str) -> str:
    return parse_clock(value).strftime("%H:%M")
