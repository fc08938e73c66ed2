# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All timestamps are stored in UTC (PostgreSQL TIMESTAMPTZ) and every Python
datetime is timezone-aware. Weekly meeting times are plain ``time`` values
that get converted to minutes since midnight for overlap arithmetic.

Usage:
    from registrar.utils.datetime import utc_now, minutes_since_midnight

    created_at = mapped_column(DateTime(timezone=True), default=utc_now)
    start = minutes_since_midnight("08:00")
"""

from datetime import datetime, time, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def parse_clock(value: time | str) -> time:
    """Parse a wall-clock value.

    Args:
        value: A ``time`` or a string in ``HH:MM`` or ``HH:MM:SS`` form.

    Returns:
        The parsed time.

    Raises:
        ValueError: If the string is empty or malformed.
    """
    if isinstance(value, time):
        return value
    if not value:
        raise ValueError("empty clock value")
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid clock value: {value!r}")


def minutes_since_midnight(value: time | str) -> int:
    """Convert a wall-clock value to minutes since midnight.

    Example:
        >>> minutes_since_midnight("09:30")
        570
    """
    parsed = parse_clock(value)
    return parsed.hour * 60 + parsed.minute
