from __future__ import annotations

import re

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> int:
    """Parse a 24h "HH:MM" string into minutes since midnight. Raises ValueError."""
    match = _HHMM_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM on a 24-hour clock")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # Half-open intervals: touching edges do not overlap.
    return start_a < end_b and start_b < end_a


def grid_points(window_start: int, window_end: int, step: int, duration: int) -> list[int]:
    """Grid starts from window_start whose [point, point + duration) fits inside the window."""
    if step <= 0 or duration <= 0 or window_end <= window_start:
        return []
    points: list[int] = []
    current = window_start
    while current + duration <= window_end:
        points.append(current)
        current += step
    return points


def is_grid_aligned(minutes: int, window_start: int, step: int) -> bool:
    return minutes >= window_start and (minutes - window_start) % step == 0
