# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schedule conflict detector.

Each section expands to weekly (day, start, end) blocks in minutes since
midnight. Two blocks conflict iff they share a day and their half-open
intervals intersect, so a class ending at 10:00 does not collide with one
starting at 10:00.
"""

from dataclasses import dataclass
from typing import Sequence

from registrar.domains.common import SectionInfo
from registrar.domains.errors import InvalidInput, ScheduleConflict
from registrar.utils.datetime import minutes_since_midnight


@dataclass(frozen=True)
class TimeBlock:
    section_id: int
    day: str
    start: int
    end: int


def blocks_for(section: SectionInfo) -> list[TimeBlock]:
    """Expand a section's meetings into time blocks.

    Raises:
        InvalidInput: If a meeting has an unparseable or empty time range.
    """
    blocks = []
    for meeting in section.meetings:
        try:
            start = minutes_since_midnight(meeting.starts_at)
            end = minutes_since_midnight(meeting.ends_at)
        except ValueError as e:
            raise InvalidInput(f"Section {section.id} has an invalid meeting time: {e}") from e
        if end <= start:
            raise InvalidInput(f"Section {section.id} has a meeting that ends before it starts")
        blocks.append(
            TimeBlock(section_id=section.id, day=meeting.day.strip().lower(), start=start, end=end)
        )
    return blocks


def blocks_overlap(a: TimeBlock, b: TimeBlock) -> bool:
    if a.day != b.day:
        return False
    return not (a.end <= b.start or b.end <= a.start)


def find_conflict(
    candidates: Sequence[SectionInfo],
    registered: Sequence[SectionInfo],
) -> tuple[int, int] | None:
    """Find the first pair of conflicting sections.

    Candidates are checked against the already-registered sections first,
    then against each other.

    Returns:
        ``(section_a, section_b)`` for the first overlap, or None.
    """
    candidate_blocks = [(s.id, blocks_for(s)) for s in candidates]
    registered_blocks = [(s.id, blocks_for(s)) for s in registered]

    for cand_id, cand in candidate_blocks:
        for reg_id, reg in registered_blocks:
            if cand_id == reg_id:
                continue
            if any(blocks_overlap(a, b) for a in cand for b in reg):
                return cand_id, reg_id

    for i, (id_a, blocks_a) in enumerate(candidate_blocks):
        for id_b, blocks_b in candidate_blocks[i + 1:]:
            if any(blocks_overlap(a, b) for a in blocks_a for b in blocks_b):
                return id_a, id_b

    return None


def check_schedule(
    candidates: Sequence[SectionInfo],
    registered: Sequence[SectionInfo],
) -> None:
    """Raise ScheduleConflict on the first overlapping pair."""
    conflict = find_conflict(candidates, registered)
    if conflict is not None:
        raise ScheduleConflict(*conflict)
